"""
=============================================================================
ROUTES
=============================================================================

A Route pairs a path pattern with a behavior. Patterns are split on "/"
into segments of three kinds:

    /hello/{first}/{*}
     ─────  ───────  ───
       │       │      │
       │       │      └── variadic: swallows every remaining segment
       │       │          (zero or more) into request.varargs
       │       └───────── dynamic:  binds one segment to params["first"]
       └───────────────── literal:  must equal the request segment

=============================================================================
SCORING
=============================================================================

Several routes of one Handler can fit a request. Each route scores the
request segments and the Handler picks the highest score:

    0                       not a match
    1                       base score for a shape match
    +2 per literal segment  that equals the request segment
    +1 per dynamic segment

A literal segment that differs from the request segment rejects the
route outright. The variadic segment adds nothing, so an explicit
pattern always beats a catch-all:

    request   /hello/Ada/Lovelace
    /hello/{first}/{last}     1 + 2 + 1 + 1 = 5   ← wins
    /hello/{*}                1 + 2         = 3

A pattern that equals the request segment for segment is an exact match
and is taken without scoring.

=============================================================================
"""

from enum import Enum
from typing import TYPE_CHECKING, Callable, List, NamedTuple, Optional, Sequence
import logging
import re

from .exceptions import RouteError
from .response import EXCEPTION_ERROR
from .status_codes import HTTPStatus

if TYPE_CHECKING:
    from .request import HTTPRequest
    from .response import HTTPResponse


logger = logging.getLogger(__name__)


# Signature of a route behavior. Behaviors fill in the response; anything
# they return is ignored.
Behavior = Callable[["HTTPRequest", "HTTPResponse"], None]

VARIADIC = "{*}"

# {name} where name is letters, digits and underscores
DYNAMIC_PATTERN = re.compile(r"^\{([A-Za-z0-9_]+)\}$")


class SegmentKind(Enum):
    LITERAL = "literal"
    DYNAMIC = "dynamic"
    VARIADIC = "variadic"


class Segment(NamedTuple):
    """One "/"-separated piece of a route pattern."""

    kind: SegmentKind
    text: str           # literal text, the parameter name, or "{*}"

    @classmethod
    def parse(cls, text: str) -> "Segment":
        if text == VARIADIC:
            return cls(SegmentKind.VARIADIC, text)

        match = DYNAMIC_PATTERN.match(text)
        if match:
            return cls(SegmentKind.DYNAMIC, match.group(1))

        return cls(SegmentKind.LITERAL, text)


class Route:
    """
    A compiled path pattern and the behavior to run when it is chosen.

    Attributes:
        path: The pattern as given ("/hello/{name}").
        behavior: Callable taking (request, response).
        segments: Parsed pattern segments.
    """

    def __init__(self, path: str, behavior: Behavior):
        """
        Args:
            path: Pattern such as "/users/{id}" or "/files/{*}".
            behavior: Called with (request, response) when this route wins.

        Raises:
            RouteError: "{*}" appears anywhere but the last segment.
        """
        self.path = path
        self.behavior = behavior
        self.segments: List[Segment] = [
            Segment.parse(part) for part in path.split("/") if part
        ]

        for i, segment in enumerate(self.segments[:-1]):
            if segment.kind is SegmentKind.VARIADIC:
                raise RouteError(
                    f"'{VARIADIC}' must be the last segment of a route, "
                    f"found at position {i} in {path!r}"
                )

    def __repr__(self) -> str:
        return f"Route({self.path!r})"

    @property
    def is_variadic(self) -> bool:
        return bool(self.segments) and self.segments[-1].kind is SegmentKind.VARIADIC

    @property
    def fixed_length(self) -> int:
        """Number of segments that each consume exactly one request segment."""
        return len(self.segments) - 1 if self.is_variadic else len(self.segments)

    # =========================================================================
    # MATCHING
    # =========================================================================

    def matches_perfectly(self, segments: Sequence[str]) -> bool:
        """True when the pattern text equals the request segments verbatim."""
        return [_raw(pattern) for pattern in self.segments] == list(segments)

    def how_correct(self, segments: Sequence[str]) -> int:
        """
        Score how well this route fits the request segments.

        Returns:
            0 if the route cannot serve the request, otherwise a positive
            score; higher is a better fit.
        """
        if self.is_variadic:
            if len(segments) < self.fixed_length:
                return 0
        elif len(segments) != len(self.segments):
            return 0

        score = 1
        for pattern, actual in zip(self.segments, segments):
            if pattern.kind is SegmentKind.LITERAL:
                if pattern.text != actual:
                    return 0
                score += 2
            elif pattern.kind is SegmentKind.DYNAMIC:
                score += 1

        return score

    # =========================================================================
    # INVOCATION
    # =========================================================================

    def bind(self, request: "HTTPRequest") -> None:
        """Copy {name} values into request.params and {*} tail into varargs."""
        params = {}
        actual = request.segments

        for i, pattern in enumerate(self.segments):
            if pattern.kind is SegmentKind.DYNAMIC:
                params[pattern.text] = actual[i]
            elif pattern.kind is SegmentKind.VARIADIC:
                request.merge_varargs(actual[i:])

        request.merge_params(params)

    def invoke(self, request: "HTTPRequest", response: "HTTPResponse") -> None:
        """
        Bind the request and run the behavior.

        An exception escaping the behavior is logged and turned into a 500
        response. It never reaches the connection thread.
        """
        try:
            self.bind(request)
            self.behavior(request, response)
        except Exception as e:
            logger.exception(f"Route {self.path} failed for {request.full_path}")
            response.error(HTTPStatus.INTERNAL_SERVER_ERROR, _error_text(e), e)


def _raw(segment: Segment) -> str:
    """Pattern text as written, so "{id}" for a dynamic segment."""
    if segment.kind is SegmentKind.DYNAMIC:
        return "{" + segment.text + "}"
    return segment.text


def _error_text(exc: Exception) -> str:
    message = str(exc)
    return message if message else EXCEPTION_ERROR


def best_route(routes: Sequence[Route], segments: Sequence[str]) -> Optional[Route]:
    """
    Pick the route that best fits `segments`.

    Exact matches win immediately. Otherwise the strictly highest positive
    score wins; on a tie the route registered first is kept.
    """
    best: Optional[Route] = None
    best_score = 0

    for route in routes:
        if route.matches_perfectly(segments):
            return route

        score = route.how_correct(segments)
        if score > best_score:
            best = route
            best_score = score

    return best
