"""In-memory account forest built from a flat account list."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.accounting import Account
from app.domain.accounting.account_service import list_accounts


@dataclass
class AccountNode:
    account: Account
    level: int = 0
    children: List["AccountNode"] = field(default_factory=list)
    is_expanded: bool = False


def build_account_tree(accounts: List[Account]) -> List[AccountNode]:
    """
    Arrange accounts into a forest.

    Accounts are indexed by id once; an account whose parent is missing from
    the list becomes a root. Siblings and roots are ordered by code.
    """
    nodes: Dict[UUID, AccountNode] = {account.id: AccountNode(account=account) for account in accounts}
    roots: List[AccountNode] = []

    for node in nodes.values():
        parent_node = nodes.get(node.account.parent_id) if node.account.parent_id else None
        if parent_node is None:
            roots.append(node)
        else:
            parent_node.children.append(node)

    by_code = lambda n: n.account.code
    roots.sort(key=by_code)

    # Assign levels and order children without recursion
    stack = [(root, 0) for root in roots]
    while stack:
        node, level = stack.pop()
        node.level = level
        node.children.sort(key=by_code)
        stack.extend((child, level + 1) for child in node.children)

    return roots


def flatten_tree(nodes: List[AccountNode]) -> List[AccountNode]:
    """Pre-order listing of a forest."""
    flattened: List[AccountNode] = []
    stack = list(reversed(nodes))
    while stack:
        node = stack.pop()
        flattened.append(node)
        stack.extend(reversed(node.children))
    return flattened


def search_tree(nodes: List[AccountNode], term: str) -> List[AccountNode]:
    """
    Filter a forest to accounts whose code or name contains ``term``.

    Ancestors of matching accounts are kept (and marked expanded) so matches
    stay reachable. An empty term returns the forest unchanged.
    """
    term = (term or "").strip().lower()
    if not term:
        return nodes

    def matches(node: AccountNode) -> bool:
        return term in node.account.code.lower() or term in node.account.name.lower()

    def prune(node: AccountNode) -> Optional[AccountNode]:
        kept = [pruned for pruned in (prune(child) for child in node.children) if pruned]
        if not kept and not matches(node):
            return None
        return AccountNode(
            account=node.account,
            level=node.level,
            children=kept,
            is_expanded=bool(kept),
        )

    return [pruned for pruned in (prune(node) for node in nodes) if pruned]


def get_account_tree(db: Session, search: Optional[str] = None) -> List[AccountNode]:
    """Account forest for the whole chart, optionally filtered by a search term."""
    tree = build_account_tree(list_accounts(db))
    if search:
        tree = search_tree(tree, search)
    return tree
