def grade(client, headers, task_id, student_id, points):
    r = client.post(
        "/admin/final/grading/grade",
        headers=headers,
        json={"task_id": task_id, "student_id": student_id, "points": points},
    )
    assert r.status_code == 200, r.text


def test_update_final_grade_endpoint(client, seed, auth_header):
    admin = auth_header(seed.admin_id)
    grade(client, admin, seed.task_a_id, seed.student_id, 20)
    grade(client, admin, seed.task_b_id, seed.student_id, 15)

    r = client.post(
        "/admin/final/simple-grades/update",
        headers=admin,
        json={
            "student_id": seed.student_id,
            "group_id": seed.group_id,
            "overall_feedback": "Well done",
        },
    )

    assert r.status_code == 200, r.text
    body = r.json()
    assert body["total_points"] == 35
    assert body["overall_feedback"] == "Well done"
    assert body["evaluator_id"] == seed.admin_id


def test_update_final_grade_errors(client, seed, auth_header):
    admin = auth_header(seed.admin_id)

    r = client.post(
        "/admin/final/simple-grades/update",
        headers=admin,
        json={"student_id": seed.outsider_id, "group_id": seed.group_id},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Student is not a member of this group"

    r = client.post(
        "/admin/final/simple-grades/update",
        headers=admin,
        json={"student_id": seed.student_id, "group_id": seed.group_id},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "No graded tasks found for this student"

    r = client.post(
        "/admin/final/simple-grades/update",
        headers=auth_header(seed.student_id),
        json={"student_id": seed.student_id, "group_id": seed.group_id},
    )
    assert r.status_code == 403


def test_simple_grades_views(client, seed, auth_header):
    admin = auth_header(seed.admin_id)
    grade(client, admin, seed.task_b_id, seed.student_id, 15)

    r = client.get(
        f"/admin/final/simple-grades?group_id={seed.group_id}&student_id={seed.student_id}",
        headers=admin,
    )
    assert r.status_code == 200
    assert r.json()["grade_summary"]["total_points"] == 15
    assert r.json()["grade_summary"]["graded_task_count"] == 1

    r = client.get(f"/admin/final/simple-grades?group_id={seed.group_id}", headers=admin)
    assert [row["student_id"] for row in r.json()["group_grades"]] == [seed.student_id]

    r = client.get("/admin/final/simple-grades?group_id=9999", headers=admin)
    assert r.status_code == 404

    r = client.get("/admin/final/simple-grades", headers=admin)
    assert r.json()["stats"]["total_students"] == 2


def test_recalculate_all_endpoint(client, seed, auth_header):
    admin = auth_header(seed.admin_id)
    grade(client, admin, seed.task_b_id, seed.student_id, 15)
    client.post(
        "/admin/final/simple-grades/update",
        headers=admin,
        json={"student_id": seed.student_id, "group_id": seed.group_id},
    )
    grade(client, admin, seed.task_a_id, seed.student_id, 5)

    r = client.post("/admin/final/simple-grades/recalculate", headers=admin)
    assert r.status_code == 200
    assert r.json() == {"recalculated": 1, "failed": 0, "failures": []}

    r = client.get("/admin/final/evaluations", headers=admin)
    assert r.status_code == 200
    assert r.json()[0]["total_points"] == 20


def test_student_summary_requires_group(client, seed, auth_header):
    r = client.get(
        f"/admin/final/simple-grades?student_id={seed.student_id}",
        headers=auth_header(seed.admin_id),
    )

    assert r.status_code == 400
    assert r.json()["detail"] == "student_id requires group_id"
