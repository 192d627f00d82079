from examprep.models import ExamAnswer, ExamSession

from conftest import OTHER, OWNER


class TestSessionStats:
    def test_no_completed_sessions_gives_zeroes(self, client, login, factory):
        exam = factory.exam()
        factory.session(exam, completed=False, score=50)

        login(OWNER)
        response = client.get("/api/session/stats")

        assert response.status_code == 200
        body = response.json()
        assert body["sessions"] == []
        assert body["stats"] == {
            "totalSessions": 0,
            "averageScore": 0,
            "bestScore": 0,
            "totalQuestions": 0,
            "totalCorrect": 0,
        }

    def test_aggregates_completed_sessions(self, client, login, factory):
        exam = factory.exam()
        factory.session(exam, score=80, total_questions=10, correct_count=8)
        factory.session(exam, score=90, total_questions=10, correct_count=9)
        factory.session(exam, score=100, total_questions=5, correct_count=5)
        factory.session(exam, user=OTHER, score=10, total_questions=10, correct_count=1)

        login(OWNER)
        body = client.get("/api/session/stats").json()

        assert body["stats"] == {
            "totalSessions": 3,
            "averageScore": 90,
            "bestScore": 100,
            "totalQuestions": 25,
            "totalCorrect": 22,
        }
        assert [s["score"] for s in body["sessions"]] == [100, 90, 80]


class TestSessionLifecycle:
    def test_start_creates_then_resumes(self, client, login, factory):
        exam = factory.exam()
        login(OWNER)

        first = client.post("/api/session/start", json={"examId": exam.id, "questionIds": ["a", "b", "c"]})
        second = client.post("/api/session/start", json={"examId": exam.id, "questionIds": ["a"]})

        assert first.status_code == 200
        session = first.json()["session"]
        assert session["completed"] is False
        assert session["total_questions"] == 3
        assert second.json()["session"]["id"] == session["id"]

    def test_start_requires_exam_id(self, client, login):
        login(OWNER)
        assert client.post("/api/session/start", json={}).status_code == 400

    def test_start_on_unreadable_exam(self, client, login, factory):
        exam = factory.exam(owner=OWNER)
        login(OTHER)
        assert client.post("/api/session/start", json={"examId": exam.id}).status_code == 403
        assert client.post("/api/session/start", json={"examId": "missing"}).status_code == 404

    def test_answer_then_finish(self, client, login, factory, db):
        exam = factory.exam()
        questions = [factory.question(exam, n) for n in range(1, 5)]
        session = factory.session(exam, completed=False)

        login(OWNER)
        for question, correct in zip(questions, [True, False, True, True]):
            response = client.post("/api/session/answer", json={
                "sessionId": session.id,
                "questionId": question.id,
                "selectedAnswer": "A" if correct else "B",
                "isCorrect": correct,
            })
            assert response.status_code == 200

        # Changing an answer replaces it rather than adding a row
        client.post("/api/session/answer", json={
            "sessionId": session.id,
            "questionId": questions[0].id,
            "selectedAnswer": "A",
            "isCorrect": True,
        })
        assert db.query(ExamAnswer).filter_by(session_id=session.id).count() == 4

        response = client.post("/api/session/finish", json={"sessionId": session.id, "elapsedTime": 125})

        assert response.status_code == 200
        body = response.json()
        assert body["results"] == {
            "totalQuestions": 4,
            "correctCount": 3,
            "wrongCount": 1,
            "score": 75,
            "wrongQuestionIds": [questions[1].id],
        }
        assert body["session"]["completed"] is True
        assert body["session"]["elapsed_time"] == 125

    def test_answer_requires_fields(self, client, login):
        login(OWNER)
        response = client.post("/api/session/answer", json={"sessionId": "s"})
        assert response.status_code == 400

    def test_cannot_touch_someone_elses_session(self, client, login, factory):
        exam = factory.exam()
        question = factory.question(exam, 1)
        session = factory.session(exam, user=OWNER, completed=False)

        login(OTHER)
        answer = client.post("/api/session/answer", json={
            "sessionId": session.id, "questionId": question.id, "selectedAnswer": "A",
        })
        finish = client.post("/api/session/finish", json={"sessionId": session.id})

        assert answer.status_code == 403
        assert finish.status_code == 403

    def test_answer_for_question_of_another_exam_is_rejected(self, client, login, factory, db):
        exam = factory.exam()
        private = factory.exam(owner=OTHER)
        foreign = factory.question(private, 1)
        session = factory.session(exam, completed=False)

        login(OWNER)
        response = client.post("/api/session/answer", json={
            "sessionId": session.id, "questionId": foreign.id, "selectedAnswer": "A", "isCorrect": True,
        })

        assert response.status_code == 400
        assert response.json() == {"error": "Question does not belong to this session's exam"}
        assert db.query(ExamAnswer).filter_by(session_id=session.id).count() == 0

    def test_answer_for_unknown_question(self, client, login, factory):
        exam = factory.exam()
        session = factory.session(exam, completed=False)

        login(OWNER)
        response = client.post("/api/session/answer", json={
            "sessionId": session.id, "questionId": "missing", "selectedAnswer": "A",
        })

        assert response.status_code == 404
        assert response.json() == {"error": "Question not found"}

    def test_finish_missing_session(self, client, login):
        login(OWNER)
        assert client.post("/api/session/finish", json={"sessionId": "missing"}).status_code == 404
        assert client.post("/api/session/finish", json={}).status_code == 400


class TestDeleteSessions:
    def test_deletes_only_own_sessions(self, client, login, factory, db):
        exam = factory.exam()
        question = factory.question(exam, 1)
        mine = factory.session(exam, user=OWNER)
        factory.answer(mine, question, True)
        theirs = factory.session(exam, user=OTHER)
        mine_id, theirs_id = mine.id, theirs.id

        login(OWNER)
        response = client.post("/api/sessions/delete", json={"sessionIds": [mine_id, theirs_id, "ghost"]})

        assert response.status_code == 200
        assert response.json() == {"success": True, "deletedCount": 1, "requestedCount": 3}
        db.expire_all()
        assert db.get(ExamSession, mine_id) is None
        assert db.get(ExamSession, theirs_id) is not None
        assert db.query(ExamAnswer).count() == 0

    def test_requires_a_non_empty_list(self, client, login):
        login(OWNER)
        assert client.post("/api/sessions/delete", json={"sessionIds": []}).status_code == 400
        assert client.post("/api/sessions/delete", json={"sessionIds": "abc"}).status_code == 400
        assert client.post("/api/sessions/delete", json={}).status_code == 400
