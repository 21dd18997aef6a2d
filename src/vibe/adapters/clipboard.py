"""Portapapeles y navegador para `vibe gemini`.

- Local: pyperclip + `webbrowser`.
- Vía SSH: secuencia OSC 52, que el emulador de terminal *local* puede
  interceptar para escribir en su portapapeles.
"""

from __future__ import annotations

import base64
import os
import webbrowser
from typing import Mapping

import pyperclip

GEMINI_URL = "https://gemini.google.com/app"


class ClipboardError(RuntimeError):
    pass


def is_running_via_ssh(environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return any(env.get(name) for name in ("SSH_CLIENT", "SSH_TTY", "SSH_CONNECTION"))


def osc52_sequence(content: str) -> str:
    """ESC ] 52 ; c ; <base64> BEL (BEL es el terminador más compatible)."""

    encoded = base64.b64encode(content.encode("utf-8")).decode("ascii")
    return f"\x1b]52;c;{encoded}\x07"


def copy_to_clipboard(content: str) -> None:
    try:
        pyperclip.copy(content)
    except pyperclip.PyperclipException as exc:
        raise ClipboardError(str(exc)) from exc


def open_in_browser(url: str = GEMINI_URL) -> bool:
    return webbrowser.open(url)
