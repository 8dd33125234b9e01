"""Tests for writing email actions back out as documents."""

import itertools
import random

import pytest

from watch_actions.mail import (
    Authentication,
    DataAttachment,
    EmailAction,
    EmailActionFactory,
    EmailTemplate,
    Profile,
    SerializationParams,
    serialize,
    to_json,
    to_yaml,
)
from watch_actions.templates import Template
from watch_actions.utils.documents import load_document

HIDE = SerializationParams(hide_secrets=True)
SHOW = SerializationParams(hide_secrets=False)

ADDRESS_FIELDS = ["from_", "to", "cc", "bcc", "reply_to"]
TEXT_FIELDS = ["subject", "text_body", "html_body"]


def build_action(present, multiple, with_auth=True, account="_account"):
    """Action with the named fields set, using one or several addresses."""
    email_fields = {}
    for name in ADDRESS_FIELDS:
        if name in present:
            count = 3 if multiple else 1
            email_fields[name] = [f"{name.strip('_')}{j}@domain" for j in range(count)]
    if "subject" in present:
        email_fields["subject"] = "Watch {{ ctx.watch_id }} fired"
    if "text_body" in present:
        email_fields["text_body"] = "payload: {{ ctx.payload }}"
    if "html_body" in present:
        email_fields["html_body"] = "<p>{{ ctx.metadata }}</p>"
    if "priority" in present:
        email_fields["priority"] = "low"

    return EmailAction(
        email=EmailTemplate(**email_fields),
        account=account,
        auth=Authentication.of("_user", "_passwd") if with_auth else None,
        profile=Profile.OUTLOOK,
        data_attachment=DataAttachment.YAML if "attach_data" in present else None,
    )


def test_field_order(factory):
    action = build_action(set(ADDRESS_FIELDS + TEXT_FIELDS + ["priority", "attach_data"]), False)
    assert list(serialize(action)) == [
        "account",
        "profile",
        "attach_data",
        "user",
        "password",
        "from",
        "reply_to",
        "priority",
        "to",
        "cc",
        "bcc",
        "subject",
        "body",
    ]


def test_serialize_scenario(factory):
    document = {
        "account": "_account",
        "profile": "standard",
        "user": "_user",
        "password": "_passwd",
        "from": "from@domain",
        "priority": "high",
        "to": "to1@domain,to2@domain",
    }
    executable = factory.parse_executable("watch1", "email1", document)
    assert serialize(executable) == {
        "account": "_account",
        "profile": "standard",
        "user": "_user",
        "password": "_passwd",
        "from": "from@domain",
        "priority": "high",
        "to": ["to1@domain", "to2@domain"],
    }


def test_hide_secrets_omits_password_but_keeps_user():
    document = serialize(build_action(set(), False), HIDE)
    assert document["user"] == "_user"
    assert "password" not in document
    assert "_passwd" not in to_json(build_action(set(), False), HIDE)


def test_no_auth_writes_no_user():
    document = serialize(build_action(set(), False, with_auth=False), SHOW)
    assert "user" not in document
    assert "password" not in document


def test_absent_fields_are_not_written():
    assert serialize(build_action(set(), False, with_auth=False)) == {
        "account": "_account",
        "profile": "outlook",
    }


def test_defaulted_account_is_written_and_reparses_without_default(email_service, engine, factory):
    defaulting = EmailActionFactory(email_service, engine, default_account="work")
    action = defaulting.parse_action("w", "a", {"to": "a@example.com"})

    document = serialize(action)

    assert document["account"] == "work"
    assert factory.parse_action("w", "a", document) == action


def test_attach_data_uses_explicit_name():
    action = build_action({"attach_data"}, False)
    assert serialize(action)["attach_data"] == "yaml"


def test_non_scalar_templates_written_as_objects():
    action = EmailAction(
        account="x",
        email=EmailTemplate(
            subject=Template.inline("no syntax"),
            text_body=Template.file("alert.txt"),
            html_body=Template.literal("{{ kept }}"),
        ),
    )
    document = serialize(action)
    assert document["subject"] == {"inline": "no syntax"}
    assert document["body"] == {"text": {"file": "alert.txt"}, "html": {"literal": "{{ kept }}"}}


def test_sanitize_flag_written_only_when_off():
    on = EmailAction(account="x", email=EmailTemplate(html_body="<p>x</p>"))
    off = EmailAction(account="x", email=EmailTemplate(html_body="<p>x</p>", sanitize_html_body=False))
    assert "sanitize_html" not in serialize(on)["body"]
    assert serialize(off)["body"]["sanitize_html"] is False


def test_executable_to_dict_matches_serialize(factory):
    executable = factory.create_executable(build_action({"to"}, True))
    assert executable.to_dict(HIDE) == serialize(executable, HIDE)


def test_json_and_yaml_text_parse_back(factory):
    action = build_action(set(ADDRESS_FIELDS + TEXT_FIELDS), True)
    assert factory.parse_action("w", "a", to_json(action)) == action
    assert factory.parse_action("w", "a", to_yaml(action)) == action


def test_redacted_yaml_keeps_user(factory):
    action = build_action({"to"}, False)
    reparsed = factory.parse_action("w", "a", load_document(to_yaml(action, HIDE)), redacted=True)
    assert reparsed.auth == Authentication(user="_user", password=None)


OPTIONAL_FIELDS = ADDRESS_FIELDS + TEXT_FIELDS + ["priority", "attach_data"]


@pytest.mark.parametrize(
    "hide_secrets, multiple, with_auth",
    list(itertools.product([False, True], [False, True], [False, True])),
)
@pytest.mark.parametrize("seed", range(8))
def test_round_trip(factory, hide_secrets, multiple, with_auth, seed):
    """Serialize then parse gives the same action, minus the hidden password."""
    rng = random.Random(seed)
    present = {name for name in OPTIONAL_FIELDS if rng.random() < 0.5}
    action = build_action(present, multiple, with_auth=with_auth)

    document = serialize(action, SerializationParams(hide_secrets=hide_secrets))
    reparsed = factory.parse_action("watch1", "email1", document, redacted=hide_secrets)

    if hide_secrets and with_auth:
        assert reparsed.auth == Authentication(user="_user", password=None)
        assert reparsed == action.redacted()
    else:
        assert reparsed == action
        if with_auth:
            assert reparsed.auth.password.get_secret_value() == "_passwd"


@pytest.mark.parametrize("present", [set(), set(OPTIONAL_FIELDS)] + [{name} for name in OPTIONAL_FIELDS])
def test_round_trip_each_field(factory, present):
    action = build_action(present, multiple=True)
    assert factory.parse_action("w", "a", serialize(action)) == action
