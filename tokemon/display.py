"""Display names for clients, models and API providers."""

from __future__ import annotations

_CLIENT_NAMES = {
    "claude-code": "Claude Code",
    "codex": "Codex CLI",
    "gemini": "Gemini CLI",
    "opencode": "OpenCode",
    "amp": "Amp",
    "cline": "Cline",
    "roo-code": "Roo Code",
    "kilo-code": "Kilo Code",
    "copilot": "GitHub Copilot",
    "pi-agent": "Pi Agent",
    "kimi": "Kimi",
    "droid": "Droid",
    "openclaw": "OpenClaw",
    "qwen": "Qwen Code",
    "piebald": "Piebald",
    "cursor": "Cursor",
}

_EXPLICIT_PREFIXES = (
    ("vertexai.", "Vertex AI"),
    ("openai/", "OpenAI"),
    ("anthropic/", "Anthropic"),
    ("google/", "Google"),
    ("bedrock/", "AWS Bedrock"),
    ("amazon.", "AWS Bedrock"),
    ("azure/", "Azure"),
    ("mistral/", "Mistral"),
)


def display_client(raw: str) -> str:
    """Map a client identifier to a human-readable name; unknown ones are title-cased."""
    return _CLIENT_NAMES.get(raw) or _title_case(raw)


def normalize_model(raw: str) -> str:
    """Canonical model name: routing prefixes, @deployment and date suffix removed."""
    return strip_date_suffix(_strip_routing_prefix(raw))


def display_model(raw: str) -> str:
    """Short model name for display, also dropping the ``claude-`` prefix."""
    name = _strip_routing_prefix(raw)
    if name.startswith("claude-"):
        name = name[len("claude-"):]
    return strip_date_suffix(name)


def infer_api_provider(raw_model: str) -> str:
    """Guess the API provider from a raw model name; empty string when unknown."""
    for prefix, provider in _EXPLICIT_PREFIXES:
        if raw_model.startswith(prefix):
            return provider

    model = raw_model.rsplit("/", 1)[-1]

    if model.startswith("claude-"):
        return "Anthropic"
    if model.startswith(("gemini-", "gemma-")):
        return "Google"
    if model.startswith("gpt-") or any(
        _matches_prefix(model, p) for p in ("o1", "o3", "o4")
    ):
        return "OpenAI"
    if model.startswith("qwen"):
        return "Alibaba"
    if model.startswith("deepseek"):
        return "DeepSeek"
    if model.startswith(("mistral", "codestral")):
        return "Mistral"
    if "llama" in model:
        return "Meta"
    return ""


def strip_date_suffix(s: str) -> str:
    """Remove a trailing ``-YYYYMMDD`` suffix, if there is one."""
    if len(s) >= 9 and s[-9] == "-":
        digits = s[-8:]
        if all(c in "0123456789" for c in digits):
            return s[:-9]
    return s


def _strip_routing_prefix(raw: str) -> str:
    name = raw.split("@", 1)[0]
    name = name.rsplit("/", 1)[-1]
    for prefix in ("vertexai.", "anthropic."):
        if name.startswith(prefix):
            return name[len(prefix):]
    return name


def _matches_prefix(model: str, prefix: str) -> bool:
    return model == prefix or (
        model.startswith(prefix) and model[len(prefix):].startswith("-")
    )


def _title_case(s: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in s.split("-"))