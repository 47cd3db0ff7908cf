"""Example 02: Declarative Validators

This example shows how to group conditions into validators. Methods decorated
with condition_handler become conditions automatically, and the subject they
examine is looked up by id only when a handler needs it.

Key Points:
-----------
1. SubjectValidator subclasses set kind_type and subject_type
2. resolve() fetches the subject for an id
3. Handlers receive a typed DataFilter[ValueType, SubjectType]
4. Declared values (value=...) are injected into the filter
5. GeneralValidator ships 30 ready-made property checks
"""

import asyncio
from enum import Enum, auto
import logging

import condkit as ck

# =============================================================================
# Domain
# =============================================================================


class User:
    def __init__(self, id, email, role, active=True):
        self.id = id
        self.email = email
        self.role = role
        self.is_active = active
        self.tags = ["beta"] if role == "admin" else []


USERS = {
    "u-1": User("u-1", "ada@example.com", "admin"),
    "u-2": User("u-2", "not-an-email", "member", active=False),
}


class UserStates(Enum):
    IS_ACTIVE = auto()
    IS_ADMIN = auto()
    IS_MEMBER = auto()


# =============================================================================
# Validators
# =============================================================================


class UserValidator(ck.SubjectValidator[User, UserStates]):
    """Role and activity checks for users."""

    kind_type = UserStates
    subject_type = User

    async def resolve(self, id):
        await asyncio.sleep(0)  # stands in for a database call
        print(f"    (resolving {id})")
        return USERS.get(id)

    @ck.condition_handler(UserStates.IS_ACTIVE, "User is not active")
    def is_active(self, f: ck.DataFilter[str, User]) -> bool:
        return f.subject is not None and f.subject.is_active

    @ck.condition_handler(UserStates.IS_ADMIN, "User is not an admin", value="admin")
    @ck.condition_handler(UserStates.IS_MEMBER, "User is not a member", value="member")
    def has_role(self, f: ck.DataFilter[str, User]) -> bool:
        return f.subject is not None and f.subject.role == f.value


class UserPropertiesValidator(ck.GeneralValidator[User]):
    """Generic property checks over the same users."""

    subject_type = User

    async def resolve(self, id):
        return USERS.get(id)


# =============================================================================
# Demonstrations
# =============================================================================


async def main():
    print("=" * 80)
    print("Example 02: Declarative Validators")
    print("=" * 80)

    checker = ck.ConditionChecker()
    ck.register_validators(checker, [UserValidator, UserPropertiesValidator])

    # -------------------------------------------------------------------------
    # 1. Checks resolve subjects on demand
    # -------------------------------------------------------------------------
    print("\n1. Role Checks:")
    print("-" * 80)

    for user_id in ("u-1", "u-2", "u-404"):
        admin = await checker.check(UserStates.IS_ADMIN, user_id)
        member = await checker.check(UserStates.IS_MEMBER, user_id)
        print(f"  {user_id}: admin={admin}, member={member}")

    # -------------------------------------------------------------------------
    # 2. An attached subject is used as-is
    # -------------------------------------------------------------------------
    print("\n2. Attached Subject (no lookup):")
    print("-" * 80)

    guest = User("g-1", "guest@example.com", "guest")
    context = ck.DataFilter(id="g-1", subject=guest)
    print(f"  IS_ACTIVE: {await checker.check(UserStates.IS_ACTIVE, context)}")

    # -------------------------------------------------------------------------
    # 3. General property checks
    # -------------------------------------------------------------------------
    print("\n3. General Property Checks:")
    print("-" * 80)

    for kind in (
        ck.GeneralStates.HAS_ID,
        ck.GeneralStates.HAS_VALID_EMAIL,
        ck.GeneralStates.IS_ACTIVE,
        ck.GeneralStates.HAS_TAGS,
    ):
        for user_id in ("u-1", "u-2"):
            result = await checker.check_and_result(kind, user_id)
            mark = "✓" if result.passed else "✗"
            print(f"  {mark} {kind.name:16s} {user_id}")

    # -------------------------------------------------------------------------
    # 4. Wiring mistakes fail at construction
    # -------------------------------------------------------------------------
    print("\n4. Wiring Faults:")
    print("-" * 80)

    class Colors(Enum):
        RED = auto()

    class BrokenValidator(ck.SubjectValidator[User, UserStates]):
        kind_type = UserStates
        subject_type = User

        async def resolve(self, id):
            return None

        @ck.condition_handler(Colors.RED)
        def is_red(self, f: ck.DataFilter[str, User]) -> bool:
            return True

    try:
        BrokenValidator(checker)
    except ck.RegistrationError as e:
        print(f"  ✓ RegistrationError (expected): {e}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")
    asyncio.run(main())
