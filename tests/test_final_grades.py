import pytest

from gradeboard.models.evaluation import FinalEvaluation
from gradeboard.models.group import GroupMember
from gradeboard.models.task_grade import TaskGrade
from gradeboard.services.errors import NoGradedTasksError, NotGroupMemberError
from gradeboard.services.final_grades import (
    get_group_final_grades,
    get_simple_grade_stats,
    get_student_grade_summary,
    recalculate_all_final_grades,
    update_student_final_grade,
)


def add_grade(db, task_id, student_id, points, feedback=None):
    db.add(TaskGrade(task_id=task_id, student_id=student_id, points=points, feedback=feedback))
    db.commit()


def test_summary_sums_every_graded_task(db, seed):
    add_grade(db, seed.task_a_id, seed.student_id, 20)
    add_grade(db, seed.task_b_id, seed.student_id, 15, feedback="solid")

    summary = get_student_grade_summary(db, seed.student_id, seed.group_id)

    assert summary is not None
    assert summary.total_points == 35
    assert summary.graded_task_count == 2
    assert {line.task_title for line in summary.task_grades} == {"Task A", "Task B"}


def test_summary_ignores_other_students_and_groups(db, seed):
    add_grade(db, seed.task_a_id, seed.student_id, 10)
    add_grade(db, seed.task_a_id, seed.student2_id, 99)

    summary = get_student_grade_summary(db, seed.student_id, seed.group_id)
    assert summary.total_points == 10
    assert summary.graded_task_count == 1

    assert get_student_grade_summary(db, seed.student_id, seed.other_group_id) is None


def test_summary_is_none_without_grades(db, seed):
    assert get_student_grade_summary(db, seed.student_id, seed.group_id) is None


def test_update_creates_snapshot_with_totals(db, seed):
    add_grade(db, seed.task_a_id, seed.student_id, 20)
    add_grade(db, seed.task_b_id, seed.student_id, 15)

    evaluation = update_student_final_grade(
        db, seed.student_id, seed.group_id, overall_feedback="Great work"
    )

    assert evaluation.total_points == 35
    assert evaluation.overall_feedback == "Great work"
    assert db.query(FinalEvaluation).count() == 1


def test_recalculating_twice_is_idempotent(db, seed):
    add_grade(db, seed.task_a_id, seed.student_id, 20)
    add_grade(db, seed.task_b_id, seed.student_id, 15)

    first = update_student_final_grade(db, seed.student_id, seed.group_id, "ok")
    first_id, first_total, first_feedback = first.id, first.total_points, first.overall_feedback

    second = update_student_final_grade(db, seed.student_id, seed.group_id, "ok")

    assert second.id == first_id
    assert second.total_points == first_total
    assert second.overall_feedback == first_feedback
    assert db.query(FinalEvaluation).count() == 1


def test_update_refreshes_stale_snapshot(db, seed):
    add_grade(db, seed.task_a_id, seed.student_id, 20)
    update_student_final_grade(db, seed.student_id, seed.group_id)

    add_grade(db, seed.task_b_id, seed.student_id, 5)
    evaluation = update_student_final_grade(db, seed.student_id, seed.group_id)

    assert evaluation.total_points == 25


def test_update_rejects_non_member(db, seed):
    with pytest.raises(NotGroupMemberError, match="Student is not a member of this group"):
        update_student_final_grade(db, seed.outsider_id, seed.group_id)


def test_update_without_grades_does_not_create_zero_snapshot(db, seed):
    with pytest.raises(NoGradedTasksError):
        update_student_final_grade(db, seed.student_id, seed.group_id)

    assert db.query(FinalEvaluation).count() == 0


def test_bulk_recalculation_continues_after_failure(db, seed, caplog):
    add_grade(db, seed.task_a_id, seed.student_id, 20)
    add_grade(db, seed.task_a_id, seed.student2_id, 12)
    update_student_final_grade(db, seed.student_id, seed.group_id, "keep me")
    update_student_final_grade(db, seed.student2_id, seed.group_id)

    # student2 leaves the group: their snapshot can no longer be recalculated
    db.query(GroupMember).filter(GroupMember.user_id == seed.student2_id).delete()
    db.commit()
    add_grade(db, seed.task_b_id, seed.student_id, 8)

    report = recalculate_all_final_grades(db)

    assert report.recalculated == 1
    assert report.failed == 1
    assert report.failures[0].student_id == seed.student2_id
    assert "Failed to recalculate final grade" in caplog.text

    refreshed = (
        db.query(FinalEvaluation)
        .filter(FinalEvaluation.user_id == seed.student_id)
        .one()
    )
    db.refresh(refreshed)
    assert refreshed.total_points == 28
    assert refreshed.overall_feedback == "keep me"


def test_group_final_grades_lists_graded_members(db, seed):
    add_grade(db, seed.task_a_id, seed.student_id, 20)

    rows = get_group_final_grades(db, seed.group_id)

    assert len(rows) == 1
    assert rows[0].student_id == seed.student_id
    assert rows[0].student_name == "Student One"
    assert rows[0].student_email == "student1@example.com"


def test_simple_grade_stats(db, seed):
    add_grade(db, seed.task_a_id, seed.student_id, 20)
    add_grade(db, seed.task_a_id, seed.student2_id, 11)
    update_student_final_grade(db, seed.student_id, seed.group_id)
    update_student_final_grade(db, seed.student2_id, seed.group_id)

    stats = get_simple_grade_stats(db)

    assert stats.total_students == 2
    assert stats.students_with_grades == 2
    assert stats.total_points_awarded == 31
    assert stats.average_points == 16
