from examprep.models import Exam, ExamSession, ExamShare, Question, QuestionAIAnalysis

from conftest import ADMIN, OTHER, OWNER


class TestListExams:
    def test_own_and_sample_exams_with_question_counts(self, client, login, factory):
        mine = factory.exam(name="Mine")
        factory.question(mine, 1)
        factory.question(mine, 2)
        factory.exam(owner=OTHER, name="Someone else's")
        sample = factory.exam(owner=None, name="Sample", is_sample=True)
        factory.question(sample, 1)

        login(OWNER)
        response = client.get("/api/exams")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        names = [e["name"] for e in body["exams"]]
        assert names == ["Sample", "Mine"]
        counts = {e["name"]: e["question_count"] for e in body["exams"]}
        assert counts == {"Sample": 1, "Mine": 2}

    def test_samples_first_then_newest_first(self, client, login, factory):
        older_own = factory.exam(name="Older own")
        sample = factory.exam(owner=OTHER, name="Sample", is_sample=True)
        newer_own = factory.exam(name="Newer own")

        login(OWNER)
        body = client.get("/api/exams").json()

        assert [e["id"] for e in body["exams"]] == [sample.id, newer_own.id, older_own.id]

    def test_exam_without_questions_counts_zero(self, client, login, factory):
        factory.exam(name="Empty")
        login(OWNER)
        body = client.get("/api/exams").json()
        assert body["exams"][0]["question_count"] == 0

    def test_no_exams(self, client, login):
        login(OTHER)
        assert client.get("/api/exams").json() == {"success": True, "exams": []}


class TestGetExam:
    def test_owner_gets_full_row(self, client, login, factory):
        exam = factory.exam(name="Mine", description="desc", file_name="mine.md")
        factory.question(exam, 1)
        login(OWNER)

        response = client.get(f"/api/exams/{exam.id}")

        assert response.status_code == 200
        data = response.json()["exam"]
        assert data["id"] == exam.id
        assert data["user_id"] == OWNER.id
        assert data["file_name"] == "mine.md"
        assert data["question_count"] == 1

    def test_sample_readable_by_anyone(self, client, login, factory):
        exam = factory.exam(owner=OWNER, is_sample=True)
        login(OTHER)
        assert client.get(f"/api/exams/{exam.id}").status_code == 200

    def test_other_users_exam_is_forbidden(self, client, login, factory):
        exam = factory.exam(owner=OWNER)
        login(OTHER)
        response = client.get(f"/api/exams/{exam.id}")
        assert response.status_code == 403
        assert "error" in response.json()

    def test_missing_exam_is_not_found(self, client, login):
        login(OWNER)
        response = client.get("/api/exams/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"error": "Exam not found"}


class TestOwnerDelete:
    def test_owner_deletes_exam_and_dependents(self, client, login, factory, db):
        exam = factory.exam()
        question = factory.question(exam, 1)
        factory.analysis(question)
        factory.session(exam)
        factory.share(exam, OWNER, OTHER)
        exam_id = exam.id

        login(OWNER)
        response = client.delete(f"/api/exams/{exam_id}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Exam deleted successfully"}
        db.expire_all()
        assert db.get(Exam, exam_id) is None
        assert db.query(Question).filter_by(exam_id=exam_id).count() == 0
        assert db.query(QuestionAIAnalysis).count() == 0
        assert db.query(ExamSession).filter_by(exam_id=exam_id).count() == 0
        assert db.query(ExamShare).filter_by(exam_id=exam_id).count() == 0

    def test_missing_exam(self, client, login):
        login(OWNER)
        assert client.delete("/api/exams/nope").status_code == 404

    def test_not_owner_is_forbidden(self, client, login, factory, db):
        exam = factory.exam(owner=OWNER)
        login(OTHER)
        response = client.delete(f"/api/exams/{exam.id}")
        assert response.status_code == 403
        assert response.json()["error"] == "You do not have permission to delete this exam"
        db.expire_all()
        assert db.get(Exam, exam.id) is not None

    def test_sample_is_forbidden_even_for_owner(self, client, login, factory, db):
        exam = factory.exam(owner=OWNER, is_sample=True)
        login(OWNER)
        response = client.delete(f"/api/exams/{exam.id}")
        assert response.status_code == 403
        assert response.json()["error"] == "Sample exams cannot be deleted"
        db.expire_all()
        assert db.get(Exam, exam.id) is not None

    def test_sample_is_forbidden_for_admin_on_owner_route(self, client, login, factory):
        exam = factory.exam(owner=ADMIN, is_sample=True)
        login(ADMIN)
        assert client.delete(f"/api/exams/{exam.id}").status_code == 403

    def test_persistence_failure_is_internal_error(self, client, login, factory, db, monkeypatch):
        exam = factory.exam()

        def broken_commit():
            raise RuntimeError("connection reset")

        monkeypatch.setattr(db, "commit", broken_commit)
        login(OWNER)
        response = client.delete(f"/api/exams/{exam.id}")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to delete exam", "details": "connection reset"}
