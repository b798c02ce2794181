import uuid

import pytest

from formbuilder.schemas.question import CHOICES_REQUIRED_MESSAGE

from conftest import create_form, create_question


def questions_url(form_id, suffix=""):
    return f"/api/forms/{form_id}/questions{suffix}"


def test_create_assigns_sequential_order(alice):
    form = create_form(alice)

    q1 = create_question(alice, form["id"], text="Name?")
    q2 = create_question(alice, form["id"], text="Color?", type="RADIO", options={"choices": ["Red", "Blue"]})
    q3 = create_question(alice, form["id"], text="Email?", type="EMAIL", required=True)

    assert [q1["order"], q2["order"], q3["order"]] == [0, 1, 2]
    assert q1["required"] is False
    assert q3["required"] is True
    assert q2["options"] == {"choices": ["Red", "Blue"]}
    assert q1["formId"] == form["id"]


def test_options_keep_extra_keys(alice):
    form = create_form(alice)
    q = create_question(
        alice,
        form["id"],
        type="SELECT",
        options={"choices": ["a", "b"], "placeholder": "Pick one"},
    )
    assert q["options"] == {"choices": ["a", "b"], "placeholder": "Pick one"}


def test_choice_types_need_two_choices(alice):
    form = create_form(alice)

    for qtype in ("RADIO", "CHECKBOX", "SELECT"):
        res = alice.post(questions_url(form["id"]), json={"text": "Pick", "type": qtype})
        assert res.status_code == 400
        assert res.json()["message"] == CHOICES_REQUIRED_MESSAGE

        res = alice.post(questions_url(form["id"]), json={"text": "Pick", "type": qtype, "options": {"choices": ["One"]}})
        assert res.status_code == 400
        assert res.json()["message"] == "At least 2 choices required"

        res = alice.post(
            questions_url(form["id"]),
            json={"text": "Pick", "type": qtype, "options": {"choices": ["One", "Two"]}},
        )
        assert res.status_code == 201


def test_empty_choice_rejected(alice):
    form = create_form(alice)
    res = alice.post(questions_url(form["id"]), json={"text": "Pick", "type": "RADIO", "options": {"choices": ["", "b"]}})
    assert res.status_code == 400
    assert res.json()["message"] == "Choices must not be empty"


def test_create_question_validation(alice):
    form = create_form(alice)

    res = alice.post(questions_url(form["id"]), json={"text": "", "type": "TEXT"})
    assert res.status_code == 400
    assert res.json()["message"] == "Question text is required"

    res = alice.post(questions_url(form["id"]), json={"text": "x" * 501, "type": "TEXT"})
    assert res.status_code == 400
    assert res.json()["message"] == "Question text must be at most 500 characters"

    res = alice.post(questions_url(form["id"]), json={"text": "Q", "type": "SLIDER"})
    assert res.status_code == 400
    assert res.json()["message"].startswith("Question type must be one of")


def test_list_questions(alice):
    form = create_form(alice)
    create_question(alice, form["id"], text="A")
    create_question(alice, form["id"], text="B")

    res = alice.get(questions_url(form["id"]))
    assert res.status_code == 200
    assert [q["text"] for q in res.json()] == ["A", "B"]


def test_get_question(alice):
    form = create_form(alice)
    q = create_question(alice, form["id"], text="A")

    res = alice.get(questions_url(form["id"], f"/{q['id']}"))
    assert res.status_code == 200
    assert res.json()["id"] == q["id"]


def test_get_missing_question(alice):
    form = create_form(alice)
    missing = str(uuid.uuid4())

    res = alice.get(questions_url(form["id"], f"/{missing}"))
    assert res.status_code == 404
    assert res.json()["message"] == f"Question with ID {missing} not found"


def test_question_from_another_form(alice):
    form_a = create_form(alice, title="A")
    form_b = create_form(alice, title="B")
    q = create_question(alice, form_a["id"])

    for method in ("get", "delete"):
        res = getattr(alice, method)(questions_url(form_b["id"], f"/{q['id']}"))
        assert res.status_code == 400
        assert res.json()["message"] == "Question does not belong to this form"

    res = alice.put(questions_url(form_b["id"], f"/{q['id']}"), json={"text": "Moved?"})
    assert res.status_code == 400


def test_questions_of_missing_form(alice):
    missing = str(uuid.uuid4())
    res = alice.get(questions_url(missing))
    assert res.status_code == 404
    assert res.json()["message"] == f"Form with ID {missing} not found"


def test_non_owner_cannot_touch_questions(alice, bob):
    form = create_form(alice)
    q = create_question(alice, form["id"])

    assert bob.get(questions_url(form["id"])).status_code == 403
    assert bob.post(questions_url(form["id"]), json={"text": "Spam", "type": "TEXT"}).status_code == 403
    assert bob.get(questions_url(form["id"], f"/{q['id']}")).status_code == 403
    assert bob.put(questions_url(form["id"], f"/{q['id']}"), json={"text": "Spam"}).status_code == 403
    assert bob.delete(questions_url(form["id"], f"/{q['id']}")).status_code == 403
    res = bob.patch(questions_url(form["id"], "/reorder"), json={"questions": [{"id": q["id"], "order": 5}]})
    assert res.status_code == 403
    assert res.json()["message"] == "You do not have access to this form"

    assert [x["text"] for x in alice.get(questions_url(form["id"])).json()] == ["Your name?"]
    assert alice.get(questions_url(form["id"])).json()[0]["order"] == 0


def test_update_question_partial(alice):
    form = create_form(alice)
    q = create_question(alice, form["id"], text="Old", required=False)

    res = alice.put(questions_url(form["id"], f"/{q['id']}"), json={"required": True})
    assert res.status_code == 200
    assert res.json()["required"] is True
    assert res.json()["text"] == "Old"
    assert res.json()["order"] == 0


def test_update_to_choice_type_needs_choices(alice):
    form = create_form(alice)
    q = create_question(alice, form["id"])

    res = alice.put(questions_url(form["id"], f"/{q['id']}"), json={"type": "RADIO"})
    assert res.status_code == 400
    assert res.json()["message"] == CHOICES_REQUIRED_MESSAGE

    res = alice.put(
        questions_url(form["id"], f"/{q['id']}"),
        json={"type": "RADIO", "options": {"choices": ["Yes", "No"]}},
    )
    assert res.status_code == 200
    assert res.json()["type"] == "RADIO"


def test_update_choice_question_keeps_existing_choices(alice):
    form = create_form(alice)
    q = create_question(alice, form["id"], type="RADIO", options={"choices": ["Yes", "No"]})

    res = alice.put(questions_url(form["id"], f"/{q['id']}"), json={"text": "Agree?"})
    assert res.status_code == 200
    assert res.json()["options"] == {"choices": ["Yes", "No"]}

    res = alice.put(questions_url(form["id"], f"/{q['id']}"), json={"options": {"choices": ["Only"]}})
    assert res.status_code == 400
    assert res.json()["message"] == "At least 2 choices required"


def test_delete_question_keeps_gaps(alice):
    form = create_form(alice)
    q0 = create_question(alice, form["id"], text="A")
    q1 = create_question(alice, form["id"], text="B")
    create_question(alice, form["id"], text="C")

    res = alice.delete(questions_url(form["id"], f"/{q1['id']}"))
    assert res.status_code == 204

    remaining = alice.get(questions_url(form["id"])).json()
    assert [(q["text"], q["order"]) for q in remaining] == [("A", 0), ("C", 2)]

    q3 = create_question(alice, form["id"], text="D")
    assert q3["order"] == 3
    assert alice.get(questions_url(form["id"], f"/{q0['id']}")).json()["order"] == 0


def test_reorder_end_to_end(alice):
    form = create_form(alice, title="Survey")
    q1 = create_question(alice, form["id"], text="Name?", type="TEXT")
    q2 = create_question(alice, form["id"], text="Color?", type="RADIO", options={"choices": ["Red", "Blue"]})
    assert (q1["order"], q2["order"]) == (0, 1)

    res = alice.patch(
        questions_url(form["id"], "/reorder"),
        json={"questions": [{"id": q2["id"], "order": 0}, {"id": q1["id"], "order": 1}]},
    )
    assert res.status_code == 200
    assert [q["id"] for q in res.json()] == [q2["id"], q1["id"]]

    listed = alice.get(questions_url(form["id"])).json()
    assert [(q["id"], q["order"]) for q in listed] == [(q2["id"], 0), (q1["id"], 1)]


def test_reorder_with_foreign_question_changes_nothing(alice):
    form_a = create_form(alice, title="A")
    form_b = create_form(alice, title="B")
    a1 = create_question(alice, form_a["id"], text="a1")
    a2 = create_question(alice, form_a["id"], text="a2")
    b1 = create_question(alice, form_b["id"], text="b1")

    res = alice.patch(
        questions_url(form_a["id"], "/reorder"),
        json={"questions": [{"id": a2["id"], "order": 0}, {"id": a1["id"], "order": 1}, {"id": b1["id"], "order": 2}]},
    )
    assert res.status_code == 400
    assert res.json()["message"] == f"Question with ID {b1['id']} does not belong to this form"

    listed = alice.get(questions_url(form_a["id"])).json()
    assert [(q["text"], q["order"]) for q in listed] == [("a1", 0), ("a2", 1)]
    assert alice.get(questions_url(form_b["id"])).json()[0]["order"] == 0


def test_reorder_validation(alice):
    form = create_form(alice)
    q = create_question(alice, form["id"])
    url = questions_url(form["id"], "/reorder")

    res = alice.patch(url, json={"questions": []})
    assert res.status_code == 400
    assert res.json()["message"] == "Questions must contain at least 1 item(s)"

    res = alice.patch(url, json={"questions": [{"id": "not-a-uuid", "order": 0}]})
    assert res.status_code == 400
    assert res.json()["message"] == "Question ID must be a valid UUID"

    res = alice.patch(url, json={"questions": [{"id": q["id"], "order": -1}]})
    assert res.status_code == 400
    assert res.json()["message"] == "Order must be greater than or equal to 0"


@pytest.mark.parametrize(
    "body, message",
    [
        ({"text": None}, "Question text must not be null"),
        ({"type": None}, "Question type must not be null"),
        ({"required": None}, "required must not be null"),
    ],
)
def test_update_question_rejects_null(alice, body, message):
    form = create_form(alice)
    q = create_question(alice, form["id"], text="Name?")

    res = alice.put(questions_url(form["id"], f"/{q['id']}"), json=body)
    assert res.status_code == 400
    assert res.json() == {"statusCode": 400, "message": message, "error": "Bad Request"}

    stored = alice.get(questions_url(form["id"], f"/{q['id']}")).json()
    assert (stored["text"], stored["type"], stored["required"]) == ("Name?", "TEXT", False)
