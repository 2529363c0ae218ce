import pytest

from nightingale_cms.identity import (
    NO_PERSON_ASSIGNED,
    PEOPLE_LOADING,
    UNLINKED_PERSON,
    build_people_index,
    derive_person_name,
    resolve_person,
)


@pytest.mark.parametrize("person_id", ["5", "05", 5])
def test_resolve_equivalent_id_forms(person_id):
    person = {"id": "5", "firstName": "Jane"}
    people = [person]
    index = build_people_index(people)

    assert resolve_person(index, people, person_id) is person


@pytest.mark.parametrize("stored_id", ["5", "05", 5])
def test_resolve_same_person_whatever_the_stored_form(stored_id):
    person = {"id": stored_id}
    people = [person]
    index = build_people_index(people)

    found = {id(resolve_person(index, people, q)) for q in ("5", "05", 5)}
    assert found == {id(person)}


def test_resolve_falsy_id_returns_none():
    people = [{"id": "1"}]
    index = build_people_index(people)
    assert resolve_person(index, people, None) is None
    assert resolve_person(index, people, "") is None


def test_resolve_falls_back_to_linear_scan():
    person = {"id": "9"}
    # index deliberately missing the person
    assert resolve_person({}, [person], "9") is person
    assert resolve_person(None, [person], "09") is person


def test_resolve_miss_returns_none():
    people = [{"id": "1"}]
    assert resolve_person(build_people_index(people), people, "99") is None


def test_display_name_precedence():
    case = {"personId": "1", "clientName": "Snapshot Name"}

    assert derive_person_name(None, {}, True, True) == NO_PERSON_ASSIGNED
    assert derive_person_name(None, case, False, True) == PEOPLE_LOADING
    assert derive_person_name({"name": "X"}, case, True, False) == UNLINKED_PERSON
    assert derive_person_name(None, {"personId": "1"}, True, True) == UNLINKED_PERSON


def test_display_name_person_fields():
    case = {"personId": "1"}

    assert derive_person_name({"firstName": "A", "lastName": "B"}, case, True, True) == "A B"
    assert derive_person_name({"name": "Full", "firstName": "A"}, case, True, True) == "Full"
    assert derive_person_name({"lastName": "Solo"}, case, True, True) == "Solo"


def test_display_name_falls_back_to_client_name():
    case = {"personId": "1", "clientName": "Case Snapshot"}
    assert derive_person_name({"id": "1"}, case, True, True) == "Case Snapshot"
    assert derive_person_name({"id": "1"}, {"personId": "1"}, True, True) == UNLINKED_PERSON


def test_display_name_is_deterministic():
    person = {"firstName": "Jane", "lastName": "Doe"}
    case = {"personId": "1"}
    assert derive_person_name(person, case, True, True) == derive_person_name(person, case, True, True)
