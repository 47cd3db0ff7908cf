"""Example 01: Basic Condition Checking

This example shows the core building blocks of condkit: an Enum of condition
kinds, LambdaCondition predicates registered in a ConditionProvider, and a
ConditionChecker that answers questions about them.

Key Points:
-----------
1. Condition kinds are plain Enum members
2. Several conditions may be registered per kind; the first pass wins
3. Evaluation never raises: faults come back as failed results
4. Enumeration-wide queries walk members in declaration order
"""

import asyncio
from enum import Enum, auto

import condkit as ck

# =============================================================================
# Condition kinds
# =============================================================================


class OrderStates(Enum):
    """Things we want to know about an order."""

    HAS_ID = auto()
    IS_PAID = auto()
    HAS_ITEMS = auto()
    IS_SHIPPED = auto()


class Order:
    def __init__(self, paid, items):
        self.paid = paid
        self.items = items


# =============================================================================
# Provider setup
# =============================================================================


def build_checker() -> ck.ConditionChecker:
    provider = ck.ConditionProvider(OrderStates)

    provider.register(
        OrderStates.HAS_ID,
        ck.LambdaCondition("HasId", lambda f: f.id is not None, "Order id is missing"),
    )

    # Two ways to be paid: a paid flag, or a voucher in the extras
    provider.register(
        OrderStates.IS_PAID,
        ck.LambdaCondition(
            "PaidFlag", lambda f: f.subject is not None and f.subject.paid, "Not paid"
        ),
    )
    provider.register(
        OrderStates.IS_PAID,
        ck.LambdaCondition(
            "Voucher", lambda f: "voucher" in (f.extras or {}), "No voucher"
        ),
    )

    async def has_items(f):
        await asyncio.sleep(0)  # stands in for an I/O lookup
        if f.subject is None:
            return ck.ConditionResult.to_failure(None, "Order not found")
        if not f.subject.items:
            return ck.ConditionResult.to_failure(f.subject.items, "Order is empty")
        return ck.ConditionResult.to_success(len(f.subject.items))

    provider.register(OrderStates.HAS_ITEMS, ck.LambdaCondition("HasItems", has_items))

    # IS_SHIPPED is deliberately left unregistered

    checker = ck.ConditionChecker()
    checker.register_provider(OrderStates, provider)
    return checker


# =============================================================================
# Demonstrations
# =============================================================================


async def main():
    print("=" * 80)
    print("Example 01: Basic Condition Checking")
    print("=" * 80)

    checker = build_checker()
    paid_order = ck.DataFilter(id="o-1", subject=Order(paid=True, items=["book"]))
    voucher_order = ck.DataFilter(
        id="o-2", subject=Order(paid=False, items=[]), extras={"voucher": "SPRING"}
    )

    # -------------------------------------------------------------------------
    # 1. Single checks
    # -------------------------------------------------------------------------
    print("\n1. Single Checks:")
    print("-" * 80)

    print(f"HAS_ID for 'o-1':        {await checker.check(OrderStates.HAS_ID, 'o-1')}")
    print(f"HAS_ID with no context:  {await checker.check(OrderStates.HAS_ID)}")
    print(f"IS_PAID (paid flag):     {await checker.check(OrderStates.IS_PAID, paid_order)}")
    print(f"IS_PAID (voucher):       {await checker.check(OrderStates.IS_PAID, voucher_order)}")

    # -------------------------------------------------------------------------
    # 2. Full results
    # -------------------------------------------------------------------------
    print("\n2. Full Results:")
    print("-" * 80)

    result = await checker.check_and_result(OrderStates.HAS_ITEMS, paid_order)
    print(f"HAS_ITEMS:   {result}")

    result = await checker.check_and_result(OrderStates.IS_SHIPPED, paid_order)
    print(f"IS_SHIPPED:  {result}")

    # check_with_error reports whether a message is available, not a pass
    available, message = await checker.check_with_error(OrderStates.HAS_ITEMS, voucher_order)
    print(f"check_with_error: available={available}, message={message!r}")

    # -------------------------------------------------------------------------
    # 3. Enumeration-wide queries
    # -------------------------------------------------------------------------
    print("\n3. Enumeration-wide Queries:")
    print("-" * 80)

    print(f"check_all (IS_SHIPPED is skipped): {await checker.check_all(OrderStates, paid_order)}")
    print(f"check_any:                         {await checker.check_any(OrderStates, voucher_order)}")

    details = await checker.get_failed_condition_details(OrderStates, voucher_order)
    print("Failed conditions for 'o-2':")
    for kind, message in details.items():
        print(f"  ✗ {kind.name:12s} {message}")

    # -------------------------------------------------------------------------
    # 4. Notifications
    # -------------------------------------------------------------------------
    print("\n4. Notifications:")
    print("-" * 80)

    @checker.condition_failed.subscribe
    def on_failed(sender, result):
        print(f"  [event] condition failed: {result.message}")

    await checker.execute_condition_with_callbacks(
        OrderStates.HAS_ITEMS,
        voucher_order,
        on_failure=lambda r: print(f"  [callback] asking customer to add items ({r.message})"),
    )


if __name__ == "__main__":
    asyncio.run(main())
