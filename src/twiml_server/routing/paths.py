from __future__ import annotations

from twiml_server.responses import RequestKind

GENERATED_ACTION_PREFIX = "_generated/action"
GENERATED_CALLBACK_PREFIX = "_generated/callback"


def compose_path(kind: RequestKind, path: str, *, prefix: bool) -> str:
    """Normalize ``path`` and optionally prefix it with the request kind.

    ``"/foo//bar/"`` becomes ``"/foo/bar"``, or ``"/voice/foo/bar"`` when
    prefixing is enabled for the voice router.
    """

    segments = [segment for segment in path.split("/") if segment]
    if prefix:
        segments.insert(0, kind.value)
    return "/" + "/".join(segments)


def generated_base(kind: RequestKind, base: str, *, prefix: bool) -> str:
    """Return the dispatcher base for generated routes of ``kind``.

    Without the kind prefix the kind moves inside the ``_generated`` segment,
    e.g. ``_generated/fax/action``, so every router keeps its own dispatcher.
    """

    if prefix:
        return base
    head, _, category = base.partition("/")
    return f"{head}/{RequestKind(kind).value}/{category}"


def generated_path(kind: RequestKind, base: str, identifier: str, *, prefix: bool) -> str:
    return compose_path(kind, f"{generated_base(kind, base, prefix=prefix)}/{identifier}", prefix=prefix)
