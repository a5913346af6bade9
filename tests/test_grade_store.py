from sqlalchemy.exc import OperationalError

from models.grades import Grade as GradeModel
from models.subjects import Subject as SubjectModel
from services.grade_store import GradeStore


def _student_data(number="2021-0100", first="Dan", last="Uy"):
    return {"student_number": number, "first_name": first, "last_name": last,
            "course": "BSCS", "year_level": 2}


def test_insert_and_list_students(db_session):
    store = GradeStore(db_session)

    first = store.insert_student(_student_data("A-1", "First", "One"))
    second = store.insert_student(_student_data("A-2", "Second", "Two"))

    assert first.ok and second.ok
    listed = store.list_students()
    assert listed.ok
    # 최근 등록 순
    assert [s.student_number for s in listed.data] == ["A-2", "A-1"]


def test_update_and_delete_student(db_session):
    store = GradeStore(db_session)
    created = store.insert_student(_student_data()).data

    updated = store.update_student(created.id, {"course": "BSIT", "year_level": 4})
    assert updated.ok
    assert updated.data.course == "BSIT"
    assert updated.data.year_level == 4

    deleted = store.delete_student(created.id)
    assert deleted.ok
    assert store.get_student(created.id).error.code == 404


def test_unknown_ids_report_not_found(db_session):
    store = GradeStore(db_session)

    assert store.update_student(42, {"course": "X"}).error.code == 404
    assert store.delete_subject(42).error.code == 404
    assert store.update_grade_field(42, "prelim", 80).error.code == 404


def test_duplicate_student_number_is_an_error_not_an_exception(db_session):
    store = GradeStore(db_session)
    store.insert_student(_student_data("DUP"))

    result = store.insert_student(_student_data("DUP"))

    assert not result.ok
    assert result.error.code == 500
    # 세션은 롤백되어 계속 사용 가능
    assert store.list_students().ok


def test_subject_crud(db_session):
    store = GradeStore(db_session)

    created = store.insert_subject({"subject_code": "CS101", "subject_name": "Intro", "instructor": "M. Santos"})
    assert created.ok
    assert store.update_subject(created.data.id, {"instructor": "R. Tan"}).data.instructor == "R. Tan"
    assert [s.subject_code for s in store.list_subjects().data] == ["CS101"]


def test_list_grades_filters_by_subject(seeded):
    seeded.add(SubjectModel(id=2, subject_code="IT302", subject_name="Databases", instructor="L. Garcia"))
    seeded.flush()
    seeded.add(GradeModel(id=99, student_id=1, subject_id=2, prelim=10))
    seeded.commit()

    result = GradeStore(seeded).list_grades_by_subject(1)

    assert [g.id for g in result.data] == [10, 11, 12]


def test_list_students_by_ids(seeded):
    store = GradeStore(seeded)

    assert sorted(s.id for s in store.list_students_by_ids([1, 3]).data) == [1, 3]
    assert store.list_students_by_ids([]).data == []


def test_update_single_grade_field(seeded):
    store = GradeStore(seeded)

    result = store.update_grade_field(12, "final", "72.5")

    assert result.ok
    grade = seeded.get(GradeModel, 12)
    assert grade.final == 72.5
    # 다른 필드는 그대로
    assert (grade.prelim, grade.midterm, grade.semifinal) == (50, 60, 70)


def test_empty_value_clears_field(seeded):
    store = GradeStore(seeded)

    assert store.update_grade_field(10, "prelim", "").ok
    assert seeded.get(GradeModel, 10).prelim is None


def test_grade_field_validation(seeded):
    store = GradeStore(seeded)

    assert store.update_grade_field(10, "student_id", 3).error.code == 400
    assert store.update_grade_field(10, "prelim", "eighty").error.code == 400
    assert store.update_grade_field(10, "prelim", "inf").error.code == 400
    assert seeded.get(GradeModel, 10).prelim == 78


def test_deleting_student_removes_their_grades(seeded):
    store = GradeStore(seeded)

    assert store.delete_student(3).ok

    assert [g.id for g in store.list_grades_by_subject(1).data] == [10, 11]


def test_deleting_subject_removes_its_grades(seeded):
    store = GradeStore(seeded)

    assert store.delete_subject(1).ok

    assert store.list_grades_by_subject(1).data == []
    # 학생은 그대로
    assert len(store.list_students().data) == 3


def test_grade_for_unknown_student_is_rejected(seeded):
    store = GradeStore(seeded)

    result = store.insert_grade({"student_id": 404, "subject_id": 1, "prelim": 90})

    assert result.error.code == 500
    assert store.list_grades_by_subject(1).ok


def test_database_failure_is_reported(db_session, monkeypatch):
    store = GradeStore(db_session)

    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("server has gone away"))

    monkeypatch.setattr(db_session, "query", broken_query)

    result = store.list_subjects()

    assert not result.ok
    assert result.error.code == 500
    assert result.error.message == "list subjects failed"
