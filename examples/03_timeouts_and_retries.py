"""Example 03: Timeouts, Retries and Blocking Calls

This example shows the time-bound operations of ConditionChecker and the
blocking *_sync adapters.

Key Points:
-----------
1. check_condition_with_timeout returns False instead of raising
2. evaluate_condition_with_retry waits only between attempts
3. CheckerSettings supplies defaults for both
4. *_sync methods block until the asynchronous query completes
"""

import asyncio
from datetime import timedelta
from enum import Enum, auto
import time

import condkit as ck


class ServiceStates(Enum):
    IS_REACHABLE = auto()
    IS_WARM = auto()


def build_checker() -> ck.ConditionChecker:
    provider = ck.ConditionProvider(ServiceStates)

    async def reachable(f):
        # A host that never answers
        await asyncio.sleep(3600)
        return True

    attempts = []

    def warm(f):
        attempts.append(time.monotonic())
        return len(attempts) >= 3

    provider.register(ServiceStates.IS_REACHABLE, ck.LambdaCondition("Reachable", reachable))
    provider.register(ServiceStates.IS_WARM, ck.LambdaCondition("Warm", warm, "Cache is cold"))

    settings = ck.CheckerSettings(default_timeout=0.2, retry_delay=0.05, max_retries=5)
    checker = ck.ConditionChecker(settings)
    checker.register_provider(ServiceStates, provider)
    return checker


async def run_async_demos(checker: ck.ConditionChecker):
    # -------------------------------------------------------------------------
    # 1. Timeouts
    # -------------------------------------------------------------------------
    print("\n1. Timeouts:")
    print("-" * 80)

    start = time.monotonic()
    reachable = await checker.check_condition_with_timeout(
        ServiceStates.IS_REACHABLE, "db-1", timedelta(milliseconds=50)
    )
    print(f"  explicit 50ms: reachable={reachable} after {time.monotonic() - start:.3f}s")

    start = time.monotonic()
    reachable = await checker.check_condition_with_timeout(ServiceStates.IS_REACHABLE, "db-1")
    print(f"  default {checker.settings.default_timeout}s: reachable={reachable} "
          f"after {time.monotonic() - start:.3f}s")

    # -------------------------------------------------------------------------
    # 2. Retries
    # -------------------------------------------------------------------------
    print("\n2. Retries:")
    print("-" * 80)

    start = time.monotonic()
    warm = await checker.evaluate_condition_with_retry(ServiceStates.IS_WARM, "cache")
    print(f"  warm={warm} after {time.monotonic() - start:.3f}s (3 attempts, 2 waits)")


def main():
    print("=" * 80)
    print("Example 03: Timeouts, Retries and Blocking Calls")
    print("=" * 80)

    checker = build_checker()
    asyncio.run(run_async_demos(checker))

    # -------------------------------------------------------------------------
    # 3. Blocking adapters
    # -------------------------------------------------------------------------
    print("\n3. Blocking Adapters:")
    print("-" * 80)

    # The warm condition has passed once already, so it keeps passing
    print(f"  check_sync(IS_WARM): {checker.check_sync(ServiceStates.IS_WARM, 'cache')}")
    available, message = checker.check_with_error_sync(ServiceStates.IS_WARM, "cache")
    print(f"  check_with_error_sync(IS_WARM): {available}, {message!r}")

    # -------------------------------------------------------------------------
    # 4. Unsupported operations fail fast
    # -------------------------------------------------------------------------
    print("\n4. Unsupported Operations:")
    print("-" * 80)

    try:
        checker.reset_condition_state(ServiceStates)
    except ck.UnsupportedOperationError as e:
        print(f"  ✓ {type(e).__name__}: {e}")


if __name__ == "__main__":
    main()
