"""Configuration for ConditionChecker.

CheckerSettings holds the defaults used by the checker's time-bound
operations when the caller does not pass explicit values.

Examples:
    >>> from condkit import CheckerSettings, ConditionChecker
    >>>
    >>> settings = CheckerSettings(default_timeout=0.5, retry_delay=0.05)
    >>> checker = ConditionChecker(settings=settings)
"""

from pydantic import BaseModel, ConfigDict, Field


class CheckerSettings(BaseModel):
    """Defaults for timeouts and retries.

    Attributes:
        default_timeout: Seconds check_condition_with_timeout waits when no
            timeout is given.
        retry_delay: Seconds evaluate_condition_with_retry sleeps between
            attempts when no delay is given.
        max_retries: Attempts evaluate_condition_with_retry makes when no
            max_retries is given.
    """

    model_config = ConfigDict(frozen=True)

    default_timeout: float = Field(default=5.0, gt=0)
    retry_delay: float = Field(default=0.1, ge=0)
    max_retries: int = Field(default=3, ge=1)
