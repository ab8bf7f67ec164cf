from werkzeug.datastructures import MultiDict

from mine_safety.core.forms import parse_nested_form


def test_nested_keys_become_dicts():
    form = MultiDict([("location[level]", "3"), ("location[shaft][name]", "B"), ("title", "Loose rock")])
    assert parse_nested_form(form) == {
        "title": "Loose rock",
        "location": {"level": "3", "shaft": {"name": "B"}},
    }


def test_bracket_suffix_and_repeated_keys_become_lists():
    form = MultiDict([("tags[]", "gas"), ("tags[]", "ventilation"), ("crew", "a"), ("crew", "b"), ("one[]", "x")])
    assert parse_nested_form(form) == {
        "tags": ["gas", "ventilation"],
        "crew": ["a", "b"],
        "one": ["x"],
    }


def test_malformed_keys_are_kept_verbatim():
    form = MultiDict([("a[b", "1"), ("c]d", "2"), ("e[f]g[h]", "3")])
    assert parse_nested_form(form) == {"a[b": "1", "c]d": "2", "e[f]g[h]": "3"}


def test_urlencoded_bodies_reach_handlers_nested(auth_client):
    response = auth_client.post(
        "/api/checklist",
        data={"title": "Pre-shift", "items[lamp]": "ok", "items[gas_meter]": "calibrated"},
    )
    assert response.status_code == 201
    assert response.get_json()["data"]["items"] == {"lamp": "ok", "gas_meter": "calibrated"}
