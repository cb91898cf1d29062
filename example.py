"""Example usage of deepcheck comparisons."""

import json
from dataclasses import dataclass, field
from decimal import Decimal

from deepcheck import (
    Dump,
    Notice,
    Spy,
    assert_equal,
    equal,
    sort_notices,
    trail_cmp,
)


@dataclass
class LineItem:
    Sku: str
    Quantity: int
    UnitPrice: Decimal


@dataclass
class Invoice:
    Id: str
    Status: str
    Total: Decimal
    Tags: set = field(default_factory=set)
    Meta: dict = field(default_factory=dict)
    Items: list = field(default_factory=list)
    _etag: str = ""


# Invoice as stored by the legacy system
want = Invoice(
    Id="INV-001",
    Status="PAID",
    Total=Decimal("100.00"),
    Tags={"priority", "export"},
    Meta={"traceId": "abc123", "region": "eu"},
    Items=[
        LineItem("WIDGET-001", 5, Decimal("10.00")),
        LineItem("GADGET-002", 2, Decimal("25.00")),
    ],
    _etag="v1",
)

# Invoice as returned by the new system
have = Invoice(
    Id="INV-001",
    Status="paid",
    Total=Decimal("100.00"),
    Tags={"priority", "export"},
    Meta={"traceId": "xyz789", "region": "eu"},
    Items=[
        LineItem("WIDGET-001", 4, Decimal("10.00")),
    ],
    _etag="v2",
)


def main():
    print("=" * 60)
    print("deepcheck - Example")
    print("=" * 60)

    print("\nWant:")
    print(Dump().any(want))

    err = equal(want, have)
    if err is None:
        print("\nMatch: True")
        return

    print(f"\nMatch: False")
    print(f"Mismatches: {err.chain_len()}")
    print("\n" + str(err))

    print("\n" + "-" * 60)
    print("Mismatches as JSON:")
    print(json.dumps([n.to_dict() for n in err.head().walk()], indent=2))


def example_with_options():
    """Example skipping volatile fields and logging visited trails."""
    print("\n" + "=" * 60)
    print("Example with Options")
    print("=" * 60)

    log = []
    err = equal(
        want,
        have,
        skip_trails=["Invoice.Meta", "Invoice.Items"],
        skip_unexported=True,
        trail_log=log,
    )

    print("\nVisited trails:")
    for trail in log:
        print(f"  - {trail}")

    if err is not None:
        print("\n" + str(err))


def example_with_checker():
    """Example with a trail checker comparing statuses case insensitively."""
    print("\n" + "=" * 60)
    print("Example with Custom Checker")
    print("=" * 60)

    def status_checker(want, have, ops):
        if want.lower() == have.lower():
            return None
        return Notice("expected statuses to match").set_trail(ops.trail).want("%s", want).have("%s", have)

    err = equal(
        want,
        have,
        trail_checkers={"Invoice.Status": status_checker},
        skip_unexported=True,
    )
    if err is not None:
        tail = sort_notices(err, trail_cmp)
        print("\nMismatches sorted by trail:")
        for msg in tail.head().walk():
            print(f"  - {msg.trail}: {msg.header}")


def example_with_runner():
    """Example reporting to a test runner."""
    print("\n" + "=" * 60)
    print("Example with Test Runner")
    print("=" * 60)

    spy = Spy().capture()
    assert_equal(spy, [1, 2, 3], [1, 3], trail="Invoice.Lines")

    print(f"\nFailed: {spy.failed()}")
    print(spy.output())


if __name__ == "__main__":
    main()
    example_with_options()
    example_with_checker()
    example_with_runner()
