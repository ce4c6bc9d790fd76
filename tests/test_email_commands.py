"""Tests for `/email` command routing and replies."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from email_bridge.bridge.commands.render import (
    HELP_TEXT,
    INVALID_EMAIL,
    SEARCH_USAGE,
    SEND_USAGE,
)
from email_bridge.bridge.commands.router import EmailCommandRouter, handle_message
from email_bridge.config import EmailBridgeConfig

from email_fixtures import (
    ECHO_ARGV_SCRIPT,
    FakeContext,
    completed,
    fake_invoker,
    make_invoker,
    write_skill,
)


def _build_router(result=None, *, base_dir: Path = Path("/nonexistent")):
    invoker = fake_invoker(result)
    router = EmailCommandRouter(
        EmailBridgeConfig(script_base_dir=base_dir), invoker=invoker
    )
    return router, invoker


async def _run(router: EmailCommandRouter, text: str) -> list[str]:
    context = FakeContext()
    await router.handle(text, context)
    return context.replies


# --- help / routing ---


@pytest.mark.anyio
@pytest.mark.parametrize("text", ["help", "", "   ", "foobar", "UNREAD", "foobar extra args"])
async def test_unknown_or_empty_keyword_shows_help(text: str) -> None:
    router, invoker = _build_router()

    replies = await _run(router, text)

    assert replies == [HELP_TEXT]
    invoker.invoke.assert_not_awaited()


@pytest.mark.anyio
async def test_unrecognized_keyword_matches_help_reply() -> None:
    router, _ = _build_router()

    assert await _run(router, "foobar") == await _run(router, "help")


# --- unread ---


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("count", "expected"),
    [
        (3, "📬 **Unread:** 3 messages"),
        (1, "📬 **Unread:** 1 message"),
        (0, "📭 **Unread:** 0 messages"),
    ],
)
async def test_unread_reports_count(count: int, expected: str) -> None:
    router, invoker = _build_router(completed(json.dumps({"unread_count": count})))

    replies = await _run(router, "unread")

    assert replies == [expected]
    invoker.invoke.assert_awaited_once_with("unread", ())


@pytest.mark.anyio
async def test_unread_error_is_reported() -> None:
    router, _ = _build_router(completed(exit_code=1, stderr="auth failed"))

    assert await _run(router, "unread") == ["❌ Error: auth failed"]


@pytest.mark.anyio
@pytest.mark.parametrize("stdout", ["ok", '{"count": 3}', '{"unread_count": "3"}'])
async def test_unread_without_count_is_unavailable(stdout: str) -> None:
    router, _ = _build_router(completed(stdout))

    assert await _run(router, "unread") == ["Unable to fetch unread count"]


# --- summary ---


@pytest.mark.anyio
async def test_summary_relays_text() -> None:
    router, _ = _build_router(completed("You have 2 unread emails from Alice.\n"))

    assert await _run(router, "summary") == ["You have 2 unread emails from Alice."]


@pytest.mark.anyio
async def test_summary_relays_json_message() -> None:
    router, _ = _build_router(completed('{"message": "Inbox zero"}'))

    assert await _run(router, "summary") == ["Inbox zero"]


@pytest.mark.anyio
async def test_summary_failure() -> None:
    router, _ = _build_router(completed(exit_code=2, stderr="IMAP login failed"))

    assert await _run(router, "summary") == ["Email check failed: IMAP login failed"]


@pytest.mark.anyio
async def test_summary_empty_output_is_unavailable() -> None:
    router, _ = _build_router(completed(""))

    assert await _run(router, "summary") == ["Email check unavailable"]


# --- search ---


@pytest.mark.anyio
@pytest.mark.parametrize("text", ["search", "search a", "search $()", "search ;a;"])
async def test_search_requires_two_characters(text: str) -> None:
    router, invoker = _build_router()

    replies = await _run(router, text)

    assert replies == [SEARCH_USAGE]
    invoker.invoke.assert_not_awaited()


@pytest.mark.anyio
async def test_search_lists_first_five_results() -> None:
    results = [
        {"subject": f"Invoice {i}", "from": f"billing{i}@example.com"} for i in range(7)
    ]
    router, invoker = _build_router(completed(json.dumps(results)))

    replies = await _run(router, "search invoice   q1")

    invoker.invoke.assert_awaited_once_with("search", ("invoice q1",))
    assert len(replies) == 1
    reply = replies[0]
    assert reply.startswith('🔍 **Search results for "invoice q1":**\n\n')
    assert "1. **Invoice 0**\n   From: billing0@example.com\n" in reply
    assert "5. **Invoice 4**" in reply
    assert "Invoice 5" not in reply
    assert reply.endswith("_... and 2 more results_")


@pytest.mark.anyio
async def test_search_result_defaults() -> None:
    router, _ = _build_router(completed(json.dumps([{}, "bogus"])))

    reply = (await _run(router, "search report"))[0]

    assert "1. **(no subject)**\n   From: Unknown" in reply
    assert "2. **(no subject)**\n   From: Unknown" in reply
    assert "more results" not in reply


@pytest.mark.anyio
@pytest.mark.parametrize("stdout", ["[]", "nothing found", '{"results": []}'])
async def test_search_without_results(stdout: str) -> None:
    router, _ = _build_router(completed(stdout))

    assert await _run(router, "search invoice") == ['🔍 No results for "invoice"']


@pytest.mark.anyio
async def test_search_failure() -> None:
    router, _ = _build_router(completed(exit_code=1, stderr="rate limited"))

    assert await _run(router, "search invoice") == ["❌ Search failed: rate limited"]


@pytest.mark.anyio
async def test_search_query_is_sanitized_before_invoking() -> None:
    router, invoker = _build_router(completed("[]"))

    replies = await _run(router, "search invoice;rm -rf $(HOME)")

    invoker.invoke.assert_awaited_once_with("search", ("invoicerm -rf HOME",))
    assert replies == ['🔍 No results for "invoicerm -rf HOME"']


# --- send ---


@pytest.mark.anyio
@pytest.mark.parametrize(
    "text",
    [
        "send",
        "send a@b.com",
        "send a@b.com Hello",
        "send a@b.com Hello there friend",
        'send a@b.com "Hello" "Hi" "extra"',
    ],
)
async def test_send_requires_exactly_three_arguments(text: str) -> None:
    router, invoker = _build_router()

    replies = await _run(router, text)

    assert replies == [SEND_USAGE]
    invoker.invoke.assert_not_awaited()


@pytest.mark.anyio
@pytest.mark.parametrize("to", ["john", "john@example", "@example.com", "a@b"])
async def test_send_rejects_bad_address(to: str) -> None:
    router, invoker = _build_router()

    replies = await _run(router, f"send {to} Hello Hi")

    assert replies == [INVALID_EMAIL]
    invoker.invoke.assert_not_awaited()


@pytest.mark.anyio
async def test_send_rejects_subject_that_sanitizes_to_nothing() -> None:
    router, invoker = _build_router()

    replies = await _run(router, 'send john@example.com "$()" Body')

    assert replies == [SEND_USAGE]
    invoker.invoke.assert_not_awaited()


@pytest.mark.anyio
async def test_send_with_quoted_subject_and_body() -> None:
    router, invoker = _build_router(completed('{"status": "sent"}'))

    replies = await _run(
        router, 'send john@example.com "Quarterly report" "See attached; thanks"'
    )

    invoker.invoke.assert_awaited_once_with(
        "send", ("john@example.com", "Quarterly report", "See attached thanks")
    )
    assert replies == [
        "✅ **Email sent**\nTo: john@example.com\nSubject: Quarterly report"
    ]


@pytest.mark.anyio
async def test_send_unbalanced_quotes_fall_back_to_whitespace() -> None:
    router, invoker = _build_router(completed("sent"))

    await _run(router, "send john@example.com don't panic")

    invoker.invoke.assert_awaited_once_with(
        "send", ("john@example.com", "don't", "panic")
    )


@pytest.mark.anyio
async def test_send_failure() -> None:
    router, _ = _build_router(completed(exit_code=1, stderr="SMTP rejected"))

    replies = await _run(router, "send john@example.com Hi Body")

    assert replies == ["❌ Send failed: SMTP rejected"]


# --- doctor ---


@pytest.mark.anyio
async def test_doctor_pretty_prints_json() -> None:
    payload = {"email": "set", "token_file": "ok"}
    router, _ = _build_router(completed(json.dumps(payload)))

    replies = await _run(router, "doctor")

    assert replies == [
        "🔧 **Email Setup Check:**\n\n```\n"
        + json.dumps(payload, indent=2)
        + "\n```"
    ]


@pytest.mark.anyio
async def test_doctor_shows_text_and_errors() -> None:
    router, _ = _build_router(completed("all checks passed"))
    assert await _run(router, "doctor") == [
        "🔧 **Email Setup Check:**\n\n```\nall checks passed\n```"
    ]

    router, _ = _build_router(completed(exit_code=1, stderr="ZOHO_EMAIL not set"))
    assert await _run(router, "doctor") == [
        "🔧 **Email Setup Check:**\n\n```\nZOHO_EMAIL not set\n```"
    ]


# --- slash entry point ---


@pytest.mark.anyio
@pytest.mark.parametrize("text", ["/email unread", "//email unread", "/EMAIL unread"])
async def test_handle_message_routes_email_command(text: str) -> None:
    router, invoker = _build_router(completed('{"unread_count": 2}'))
    context = FakeContext()

    handled = await handle_message(router, context, text)

    assert handled is True
    assert context.replies == ["📬 **Unread:** 2 messages"]
    invoker.invoke.assert_awaited_once_with("unread", ())


@pytest.mark.anyio
async def test_handle_message_bare_email_shows_help() -> None:
    router, _ = _build_router()
    context = FakeContext()

    assert await handle_message(router, context, "/email") is True
    assert context.replies == [HELP_TEXT]


@pytest.mark.anyio
@pytest.mark.parametrize("text", ["hello", "/emails unread", "/ctx", "email unread"])
async def test_handle_message_ignores_other_text(text: str) -> None:
    router, invoker = _build_router()
    context = FakeContext()

    assert await handle_message(router, context, text) is False
    assert context.replies == []
    invoker.invoke.assert_not_awaited()


# --- end to end with a real script ---


@pytest.mark.anyio
async def test_router_runs_skill_script(tmp_path: Path) -> None:
    write_skill(
        tmp_path,
        """
        import json
        import sys
        if sys.argv[1:] == ["unread"]:
            print(json.dumps({"unread_count": 4}))
        else:
            sys.exit("unexpected argv")
        """,
    )
    config = EmailBridgeConfig(script_base_dir=tmp_path)
    router = EmailCommandRouter(config, invoker=make_invoker(tmp_path))

    assert await _run(router, "unread") == ["📬 **Unread:** 4 messages"]


@pytest.mark.anyio
async def test_router_reports_missing_script(tmp_path: Path) -> None:
    router = EmailCommandRouter(EmailBridgeConfig(script_base_dir=tmp_path))

    replies = await _run(router, "unread")

    assert len(replies) == 1
    assert replies[0].startswith("❌ Error: script not found:")


@pytest.mark.anyio
async def test_router_reports_argument_with_nul_byte(tmp_path: Path) -> None:
    write_skill(tmp_path, ECHO_ARGV_SCRIPT)
    config = EmailBridgeConfig(script_base_dir=tmp_path)
    router = EmailCommandRouter(config, invoker=make_invoker(tmp_path))

    replies = await _run(router, "search ab\x00cd")

    assert len(replies) == 1
    assert replies[0].startswith("❌ Search failed: execution failed:")
