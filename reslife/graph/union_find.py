"""
Flat, array-indexed union-find.

Positions are 0..n-1 (a member's insertion index in its graph). find() compresses
paths iteratively so very large populations never hit the recursion limit.
"""

from __future__ import annotations


class UnionFind:
    def __init__(self, size: int):
        self.parent = list(range(size))

    def __len__(self) -> int:
        return len(self.parent)

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        # Second pass: point every node on the path straight at the root
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def attach(self, child_root: int, parent_root: int) -> None:
        """Hang one root under another. Both arguments must already be roots."""
        self.parent[child_root] = parent_root

    def union(self, a: int, b: int) -> bool:
        """Merge the sets of a and b, placing a's root under b's root.

        Returns:
            True if two distinct sets were merged
        """
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return False
        self.attach(root_a, root_b)
        return True

    def members_of(self, root: int) -> list[int]:
        return [i for i in range(len(self.parent)) if self.find(i) == root]

    def count_sets(self) -> int:
        return len({self.find(i) for i in range(len(self.parent))})
