def create_assignment(client, headers, **payload):
    r = client.post("/assignments", headers=headers, json={"title": "HW1", **payload})
    assert r.status_code == 201, r.text
    return r.json()["id"]


def test_submit_and_resubmit_updates_same_row(client, seed, auth_header):
    assignment_id = create_assignment(client, auth_header(seed.lecturer_id))
    student = auth_header(seed.student_id)

    r1 = client.post(
        f"/assignments/{assignment_id}/submissions",
        headers=student,
        json={"content": "first"},
    )
    assert r1.status_code == 201, r1.text

    r2 = client.post(
        f"/assignments/{assignment_id}/submissions",
        headers=student,
        json={"content": "second"},
    )
    assert r2.status_code == 201, r2.text
    assert r2.json()["id"] == r1.json()["id"]
    assert r2.json()["content"] == "second"


def test_graded_submission_counts_once_assignment_closes(client, seed, auth_header):
    lecturer = auth_header(seed.lecturer_id)
    student = auth_header(seed.student_id)
    assignment_id = create_assignment(client, lecturer, max_score=50)

    sub = client.post(
        f"/assignments/{assignment_id}/submissions", headers=student, json={"content": "x"}
    ).json()

    r = client.patch(f"/submissions/{sub['id']}/grade", headers=lecturer, json={"score": 60})
    assert r.status_code == 400

    r = client.patch(f"/submissions/{sub['id']}/grade", headers=lecturer, json={"score": 42})
    assert r.status_code == 200
    assert r.json()["score"] == 42

    assert client.get("/grades/me", headers=student).json()["assignment_points"] == 0

    r = client.post(f"/assignments/{assignment_id}/close", headers=lecturer)
    assert r.json()["closed"] is True

    grades = client.get("/grades/me", headers=student).json()
    assert grades["assignment_points"] == 42
    assert grades["max_assignment_points"] == 50

    r = client.post(
        f"/assignments/{assignment_id}/submissions", headers=student, json={"content": "late"}
    )
    assert r.status_code == 400


def test_students_cannot_create_assignments(client, seed, auth_header):
    r = client.post("/assignments", headers=auth_header(seed.student_id), json={"title": "x"})
    assert r.status_code == 403


def test_quiz_result_counts_after_close(client, seed, auth_header):
    lecturer = auth_header(seed.lecturer_id)
    student = auth_header(seed.student_id)

    quiz = client.post("/quizzes", headers=lecturer, json={"title": "Q1", "grade": 10})
    assert quiz.status_code == 201, quiz.text
    quiz_id = quiz.json()["id"]

    assert client.post(f"/quizzes/{quiz_id}/results", headers=student, json={}).status_code == 201
    assert client.post(f"/quizzes/{quiz_id}/results", headers=student, json={}).status_code == 409

    client.post(f"/quizzes/{quiz_id}/close", headers=lecturer)

    assert client.get("/grades/me", headers=student).json()["quiz_points"] == 10
