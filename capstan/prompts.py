"""
Interactive prompts handed to every command instance.

Modes
- interactive (raw=False): questions are asked on the terminal with rich.prompt, in a
  worker thread so the command's event loop is not blocked. A failing `validate`
  prints the error and asks again.
- raw (raw=True): nothing touches the terminal. Each question emits a "prompt" event
  carrying a PromptRequest; a responder registered with on("prompt", ...) answers it
  synchronously (answer/select/accept/decline). Validation failures emit
  "prompt:error" with the message and the answer is returned as-is, there is no
  re-ask loop without a terminal.

Validation contract
- validate(value) returning a falsy value fails with "Enter the value".
- returning a non-empty string fails with that string as the message.
- returning anything else truthy accepts the value.
"""
import asyncio
from collections import defaultdict

from rich.console import Console
from rich.prompt import Confirm, Prompt as RichPrompt

from .utils import Unset, coalesce, maybe_await

VALIDATION_MESSAGE = "Enter the value"


class PromptRequest:
    """
    A question waiting for an answer in raw mode.

    Attributes
    - kind: "ask" | "secure" | "confirm" | "toggle" | "choice" | "multiple"
    - message, name, choices, default: as given to the prompt method.
    - value: the answer provided by a responder, Unset when unanswered.
    """

    def __init__(self, kind, message, *, name=None, choices=(), default=Unset):
        self.kind = kind
        self.message = message
        self.name = name
        self.choices = tuple(choices)
        self.default = default
        self.value = Unset

    def answer(self, value):
        self.value = value

    def select(self, index):
        choice = self.choices[index]
        self.value = [choice] if self.kind == "multiple" else choice

    def accept(self):
        self.value = True

    def decline(self):
        self.value = False

    def __repr__(self):
        return "prompt<%s %r>" % (self.kind, self.message)


def _verdict(result):
    # None when the value passes, the error message otherwise
    if not result:
        return VALIDATION_MESSAGE
    if isinstance(result, str):
        return result
    return None


class Prompt:
    def __init__(self, raw=False, *, console=None):
        self.raw = raw
        self.console = console if console is not None else Console()
        self._listeners = defaultdict(list)

    def on(self, event, callback):
        """
        Register a listener for "prompt" or "prompt:error" (raw mode); returns the callback.
        """
        self._listeners[event].append(callback)
        return callback

    def emit(self, event, *payload):
        for callback in tuple(self._listeners[event]):
            callback(*payload)

    async def _raw(self, request, validate, result):
        self.emit("prompt", request)
        value = request.value
        if value is Unset:
            value = coalesce(request.default)
        if validate is not None and (error := _verdict(await maybe_await(validate(value)))):
            self.emit("prompt:error", error)
        return result(value) if result is not None else value

    async def _interactive(self, ask, validate, result):
        while True:
            value = await asyncio.to_thread(ask)
            if validate is not None and (error := _verdict(await maybe_await(validate(value)))):
                self.console.print("[red]%s[/red]" % error)
                continue
            return result(value) if result is not None else value

    def _rich_options(self, default, **options):
        options["console"] = self.console
        if default is not Unset:
            options["default"] = default
        return options

    async def ask(self, message, *, name=None, default=Unset, validate=None, result=None):
        """
        Ask for free text; returns the answer (transformed by `result` when given).
        """
        if self.raw:
            return await self._raw(PromptRequest("ask", message, name=name, default=default), validate, result)
        options = self._rich_options(default)
        return await self._interactive(lambda: RichPrompt.ask(message, **options), validate, result)

    async def secure(self, message, *, name=None, validate=None, result=None):
        """
        Ask for a secret without echoing it.
        """
        if self.raw:
            return await self._raw(PromptRequest("secure", message, name=name), validate, result)
        options = self._rich_options(Unset, password=True)
        return await self._interactive(lambda: RichPrompt.ask(message, **options), validate, result)

    async def confirm(self, message, *, name=None, default=Unset):
        if self.raw:
            return await self._raw(PromptRequest("confirm", message, name=name, default=default), None, bool)
        options = self._rich_options(default)
        return await self._interactive(lambda: Confirm.ask(message, **options), None, None)

    async def toggle(self, message, choices=("Yes", "No"), *, name=None, default=Unset):
        """
        Binary choice between two labels; True means the first label was picked.
        """
        if len(choices) != 2:
            raise ValueError("toggle() needs exactly two choices")
        if self.raw:
            request = PromptRequest("toggle", message, name=name, choices=choices, default=default)
            return await self._raw(request, None, bool)
        options = self._rich_options(
            choices[0 if default else 1] if default is not Unset else Unset,
            choices=list(choices),
        )
        return await self._interactive(lambda: RichPrompt.ask(message, **options), None, lambda x: x == choices[0])

    async def choice(self, message, choices, *, name=None, default=Unset, validate=None, result=None):
        """
        Pick exactly one of `choices`.
        """
        if self.raw:
            request = PromptRequest("choice", message, name=name, choices=choices, default=default)
            return await self._raw(request, validate, result)
        options = self._rich_options(default, choices=list(choices))
        return await self._interactive(lambda: RichPrompt.ask(message, **options), validate, result)

    async def multiple(self, message, choices, *, name=None, default=Unset, validate=None, result=None):
        """
        Pick any number of `choices`; interactive answers are comma separated.
        """
        if self.raw:
            request = PromptRequest("multiple", message, name=name, choices=choices, default=default)
            return await self._raw(request, validate, result)

        choices = tuple(choices)
        options = self._rich_options(
            ", ".join(default) if default is not Unset else Unset,
            show_default=default is not Unset,
        )
        hint = "%s (%s)" % (message, ", ".join(choices))

        def ask():
            while True:
                answer = RichPrompt.ask(hint, **options)
                picked = [item.strip() for item in answer.split(",") if item.strip()]
                if all(item in choices for item in picked):
                    return picked
                self.console.print("[red]choose among: %s[/red]" % ", ".join(choices))

        return await self._interactive(ask, validate, result)


__all__ = (
    "Prompt",
    "PromptRequest",
    "VALIDATION_MESSAGE",
)
