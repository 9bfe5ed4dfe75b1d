"""Interactive configuration wizard."""
import re
from urllib.parse import urlparse

import typer

from .. import display
from ..config import API_KEY_ENV, PROJECT_KEY_PATTERN, AIProviderKind, AppConfig
from ..errors import TransportFailure
from ..runtime import Runtime, guarded

PROJECT_KEY = re.compile(PROJECT_KEY_PATTERN, re.ASCII)


def validate_url(value: str) -> bool | str:
    url = urlparse(value.strip())
    if url.scheme not in ("http", "https"):
        return "URL must start with http:// or https://"
    if not url.hostname:
        return "URL must contain a hostname"
    return True


def validate_project_key(value: str) -> bool | str:
    return True if PROJECT_KEY.fullmatch(value.strip().upper()) else "Project key must be letters only"


def _required(label: str):
    return lambda value: True if value.strip() else f"Enter {label}"


def run_setup(rt: Runtime) -> AppConfig:
    prompter = rt.prompter
    current = rt.store.get_config()
    display.info("\n🔧 jt setup\n")

    jira_url = prompter.text(
        "Jira URL:",
        default=current.jira_url if current else "https://jira.example.com",
        validate=validate_url,
    ).strip()
    username = prompter.text(
        "Username:",
        default=current.jira_username if current else "",
        validate=_required("a username"),
    ).strip()
    password = prompter.password("Password:", validate=_required("a password"))
    project_key = prompter.text(
        "Project key (e.g. PROJ):",
        default=current.project_key if current else "",
        validate=validate_project_key,
    ).strip().upper()
    provider = prompter.select(
        "AI provider:",
        [
            ("Anthropic (Claude)", AIProviderKind.ANTHROPIC),
            ("OpenAI (GPT)", AIProviderKind.OPENAI),
        ],
    )
    env_key = API_KEY_ENV[provider]
    api_key = prompter.password(
        f"AI API key (leave empty to use ${env_key}):",
    ).strip()

    config = AppConfig(
        jira_url=jira_url,
        jira_username=username,
        jira_password=password,
        project_key=project_key,
        ai_provider=provider,
        ai_api_key=api_key,
        ai_model=current.ai_model if current and current.ai_provider == provider else None,
    )

    display.info("\nChecking the Jira connection...")
    try:
        with rt.jira_factory(config) as jira:
            jira.test_connection()
    except TransportFailure as exc:
        raise TransportFailure(
            f"Could not connect to Jira: {exc}",
            hint="Check:\n  - the VPN is connected\n  - the URL is right\n  - login and password",
        ) from exc
    display.success("Connected to Jira\n")

    rt.store.save_config(config)
    display.success("Setup complete!\n")
    display.info("Now you can use:")
    display.info("  jt            - interactive mode")
    display.info('  jt q "text"   - quick AI log')
    display.info("  jt t          - templates")
    display.info("  jt a          - aliases\n")
    return config


def register(app: typer.Typer) -> None:
    @app.command("setup", help="Configure Jira and the AI provider.")
    @guarded
    def setup(ctx: typer.Context) -> None:
        run_setup(ctx.obj)
