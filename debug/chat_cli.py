"""Chat with the navigator from a terminal instead of WhatsApp.

Reads categories and questions from the configured Supabase project; replies
are printed instead of sent. Type ``quit`` to leave.
"""

from logic.dispatch import dispatch
from logic.navigation import Navigator

USER_ID = "cli"


def _print_reply(to: str, text: str) -> bool:
    print(f"\n{text}\n")
    return True


def _as_payload(text: str) -> dict:
    # Same shape Meta posts to /webhook so the dispatcher runs unchanged.
    return {
        "object": "whatsapp_business_account",
        "entry": [{"changes": [{"value": {"messages": [{"from": USER_ID, "text": {"body": text}}]}}]}],
    }


def run_cli() -> None:
    navigator = Navigator(send=_print_reply)
    while True:
        try:
            text = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            break
        if text.lower() in {"quit", "exit"}:
            break
        dispatch(_as_payload(text), navigator)


if __name__ == "__main__":
    run_cli()
