"""
Requirement validator: the post-pass over a consumed argument vector.

Rules
- every table item marked required and absent from the result yields one
  missing-required-item fault.
- every exclusive item present in the result conflicts with each other present
  item of the same flag-ness (flag with flag, command with command). Each
  unordered pair is reported once and the scan never stops early.

Items are compared by name and ordinal, so two items sharing an ordinal in a
hand-built table are still told apart.
"""
from .faults import *
from .items import sanitize_table


def _order(item):
    return item.ordinal, item.name


def validate_requirements(table, items, /):
    """
    check a consumed result against its command table.

    parameters
    - table: name -> Item (the command table)
    - items: name -> Item (the bound items of one parse)

    returns the list of new faults, missing items first, in ordinal order.
    """
    table = sanitize_table(table)
    faults = []

    for item in sorted(table.values(), key=_order):
        if item.required and item.name not in items:
            faults.append(MissingRequiredItemError(
                "item %s is required but was not found" % item.name,
                title="missing required item",
                code=FaultCode.MISSING_REQUIRED_ITEM,
                item=item.name,
                hint="add %s to the command line" % item.name,
                docs=getdoc(FaultCode.MISSING_REQUIRED_ITEM),
            ))

    present = sorted(items.values(), key=_order)
    reported = set()
    for item in present:
        if not item.exclusive:
            continue
        for other in present:
            if (other.name, other.ordinal) == (item.name, item.ordinal) or other.flag != item.flag:
                continue
            if (pair := frozenset((item.name, other.name))) in reported:
                continue
            reported.add(pair)
            faults.append(ExclusiveConflictError(
                "item %s is exclusive but was found with %s" % (item.name, other.name),
                title="exclusive conflict",
                code=FaultCode.EXCLUSIVE_CONFLICT,
                item=item.name,
                other=other.name,
                hint="use either %s or %s, not both" % (item.name, other.name),
                docs=getdoc(FaultCode.EXCLUSIVE_CONFLICT),
            ))

    return faults


__all__ = (
    "validate_requirements",
)
