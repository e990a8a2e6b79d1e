"""Org hierarchy resolution: build reporting trees and span-of-control metrics."""

import logging

import pandas as pd

from orgchart.employees.models import HierarchyNode
from orgchart.employees.snapshot import Snapshot
from orgchart.errors import EmployeeNotFoundError
from orgchart.utils.types import EmployeeID

logger = logging.getLogger(__name__)


def _build_node_index(snapshot: Snapshot) -> dict[EmployeeID, HierarchyNode]:
    """One node per record, then one pass to hang each node under its manager."""
    index = {
        r.employee_id: HierarchyNode(r.employee_id, r.manager_id, r.name, r.category)
        for r in snapshot.records
    }

    for record in snapshot.records:
        if record.manager_id is None:
            continue
        parent = index.get(record.manager_id)
        if parent is None:
            logger.warning(
                "Employee %d references unknown manager %d; left detached",
                record.employee_id,
                record.manager_id,
            )
            continue
        parent.add_reportee(index[record.employee_id])
    return index


def build_hierarchy(snapshot: Snapshot, root_id: EmployeeID) -> HierarchyNode:
    """Assemble the reporting tree below ``root_id``.

    Manager chains are assumed acyclic; the import path rejects cycles, so
    they can only appear if storage is edited out of band.
    """
    index = _build_node_index(snapshot)
    root = index.get(root_id)
    if root is None:
        raise EmployeeNotFoundError(f"Manager with ID {root_id} not found.")

    logger.info("Built hierarchy under %d from snapshot v%d", root_id, snapshot.version)
    return root


def find_roots(snapshot: Snapshot) -> list[EmployeeID]:
    """Identifiers of records with no manager, lowest first."""
    return sorted(r.employee_id for r in snapshot.records if r.manager_id is None)


def count_nodes(root: HierarchyNode) -> int:
    total = 0
    stack = [root]
    while stack:
        node = stack.pop()
        total += 1
        stack.extend(node.reportees)
    return total


def flatten_hierarchy(root: HierarchyNode) -> pd.DataFrame:
    """Flatten a tree into one row per node with depth and span-of-control metrics."""
    rows = []
    order: list[tuple[HierarchyNode, int]] = []
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        order.append((node, depth))
        stack.extend((child, depth + 1) for child in reversed(node.reportees))

    # Children appear after their parents, so walking backwards totals bottom-up
    totals: dict[EmployeeID, int] = {}
    for node, _ in reversed(order):
        totals[node.id] = sum(1 + totals[child.id] for child in node.reportees)

    for node, depth in order:
        rows.append({
            "employee_id": node.id,
            "manager_id": node.manager_id,
            "name": node.name,
            "role": node.role,
            "depth": depth,
            "direct_reports": len(node.reportees),
            "total_reports": totals[node.id],
        })

    result = pd.DataFrame(
        rows,
        columns=["employee_id", "manager_id", "name", "role", "depth", "direct_reports", "total_reports"],
    )
    result["manager_id"] = result["manager_id"].astype("Int64")
    logger.info("Flattened hierarchy under %d: %d nodes", root.id, len(result))
    return result
