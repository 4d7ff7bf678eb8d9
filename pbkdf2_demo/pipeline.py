from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum

from . import hexcodec
from .errors import DerivationError, PBKDF2DemoError, ResourceError, UsageError, ValidationError
from .kdf import DerivationParameters, HashAlgorithmId, derive_key
from .modes import Mode, describe_salt, encode_password, validate_arguments
from .stopwatch import Stopwatch
from .text_encoding import NATIVE_ENCODING


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunSettings:
    mode: Mode = Mode.NAIVE
    # How the naive mode lays out password characters in memory
    native_encoding: str = NATIVE_ENCODING


class Stage(Enum):
    INIT = 0
    VALIDATING = 1
    BUILDING_PARAMETERS = 2
    DERIVING = 3
    FORMATTING = 4
    DONE = 5
    FAILED = 6


@dataclass(frozen=True)
class Failure:
    kind: str
    message: str


_ERROR_KINDS = (UsageError, ValidationError, ResourceError, DerivationError)


def failure_kind(error: PBKDF2DemoError) -> str:
    for kind in _ERROR_KINDS:
        if isinstance(error, kind):
            return kind.__name__
    return type(error).__name__


@dataclass
class Invocation:
    """Progress of one run through the stages. It only ever moves forward."""

    stage: Stage = Stage.INIT
    failure: Failure | None = None
    history: list[Stage] = field(default_factory=lambda: [Stage.INIT])

    @property
    def finished(self) -> bool:
        return self.stage in (Stage.DONE, Stage.FAILED)

    def advance(self, stage: Stage) -> None:
        if self.finished:
            raise RuntimeError(f"Invocation already finished in {self.stage.name}.")
        if stage is Stage.FAILED or stage.value <= self.stage.value:
            raise RuntimeError(f"Cannot move from {self.stage.name} to {stage.name}.")
        logger.debug("Stage %s -> %s", self.stage.name, stage.name)
        self.stage = stage
        self.history.append(stage)

    def fail(self, error: PBKDF2DemoError) -> None:
        if self.finished:
            raise RuntimeError(f"Invocation already finished in {self.stage.name}.")
        self.failure = Failure(failure_kind(error), str(error))
        logger.debug("Stage %s -> FAILED (%s)", self.stage.name, self.failure.kind)
        self.stage = Stage.FAILED
        self.history.append(Stage.FAILED)


@dataclass(frozen=True)
class Outcome:
    algorithm: HashAlgorithmId
    salt_text: str
    iteration_count: int
    password: str
    key: bytes = field(repr=False)
    milliseconds: int
    lines: tuple[str, ...]


def format_result(
    algorithm: HashAlgorithmId,
    salt_text: str,
    iteration_count: int,
    password: str,
    key: bytes,
    milliseconds: int,
) -> tuple[str, str]:
    result = (
        f"HashType: {algorithm.value}, Salt: {salt_text}, IterationCount: {iteration_count}, "
        f"Password: '{password}', PBKDF2: {hexcodec.encode(key)}"
    )
    return result, f"Duration: {milliseconds} ms"


def run(
    settings: RunSettings,
    hash_type_arg: str,
    salt_arg: str,
    iteration_arg: str,
    password_arg: str,
    invocation: Invocation | None = None,
) -> Outcome:
    """Validate, derive and format one PBKDF2 computation.

    The first error moves ``invocation`` to FAILED and is re-raised; nothing
    is formatted in that case.
    """
    invocation = invocation if invocation is not None else Invocation()

    try:
        invocation.advance(Stage.VALIDATING)
        algorithm, salt, iteration_count = validate_arguments(
            settings.mode, hash_type_arg, salt_arg, iteration_arg
        )

        invocation.advance(Stage.BUILDING_PARAMETERS)
        params = DerivationParameters(
            algorithm=algorithm,
            salt=salt,
            iteration_count=iteration_count,
            password=encode_password(settings.mode, password_arg, settings.native_encoding),
        )

        invocation.advance(Stage.DERIVING)
        with Stopwatch() as stopwatch:
            key = derive_key(params)
        logger.debug("Derivation took %.3f s", stopwatch.elapsed)

        invocation.advance(Stage.FORMATTING)
        salt_text = describe_salt(settings.mode, params.salt)
        lines = format_result(algorithm, salt_text, iteration_count, password_arg, key, stopwatch.milliseconds)
    except PBKDF2DemoError as e:
        invocation.fail(e)
        raise

    invocation.advance(Stage.DONE)
    return Outcome(
        algorithm=algorithm,
        salt_text=salt_text,
        iteration_count=iteration_count,
        password=password_arg,
        key=key,
        milliseconds=stopwatch.milliseconds,
        lines=lines,
    )
