"""
Grouping of metadata records into primary + duplicates groups.

Two builders share candidate/group construction:

- GroupBuilder: single forward pass, greedy, leftmost primary wins. A record
  claimed as a duplicate is marked processed immediately and can never become
  a primary or be claimed again. Non-transitive and order-dependent.
- TransitiveGroupBuilder: scores every pair, then merges matching pairs into
  union-find clusters. The earliest member of a cluster becomes primary, so
  chains (A~B, B~C) end up in one group even when A and C do not match.

Both scans are O(n^2) pairwise scorings and honor the optional
max_comparisons budget from SimilarityConfig.
"""

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from artifact_dedup.models.dedup import (
    DuplicateCandidate,
    DuplicateGroup,
    MatchStatistics,
    SimilarityConfig,
    SimilarityResult,
)
from artifact_dedup.models.metadata import BaseMetadata
from artifact_dedup.services.match_classifier import (
    ConfidenceCalculator,
    MatchClassifier,
)
from artifact_dedup.services.merge_strategies import (
    MergeStrategyCatalog,
    select_merge_strategy,
)
from artifact_dedup.services.similarity_scorer import SimilarityScorer

logger = structlog.get_logger()


@dataclass
class GroupingOutcome:
    """Groups produced by one scan plus scan bookkeeping"""

    groups: List[DuplicateGroup] = field(default_factory=list)
    match_counts: Counter = field(default_factory=Counter)
    comparisons: int = 0
    truncated: bool = False

    @property
    def statistics(self) -> MatchStatistics:
        return MatchStatistics.from_counts(self.match_counts)


class GroupBuilder:
    """Greedy single-pass grouping (leftmost primary wins)."""

    def __init__(
        self,
        config: SimilarityConfig,
        catalog: Optional[MergeStrategyCatalog] = None,
        scorer: Optional[SimilarityScorer] = None,
        classifier: Optional[MatchClassifier] = None,
        confidence: Optional[ConfidenceCalculator] = None,
    ):
        self.config = config
        self.catalog = catalog or MergeStrategyCatalog()
        self.scorer = scorer or SimilarityScorer(config)
        self.classifier = classifier or MatchClassifier(config)
        self.confidence = confidence or ConfidenceCalculator()

    def build(self, items: Sequence[BaseMetadata]) -> GroupingOutcome:
        """
        Partition records into duplicate groups.

        Args:
            items: Records in scan order

        Returns:
            GroupingOutcome; records left out of every group are standalone
        """
        outcome = GroupingOutcome()
        processed: set = set()

        for i, primary in enumerate(items):
            if outcome.truncated:
                break
            if primary.id in processed:
                continue

            duplicates: List[DuplicateCandidate] = []

            for candidate in items[i + 1 :]:
                if candidate.id in processed or candidate.id == primary.id:
                    continue

                if self._budget_exhausted(outcome.comparisons):
                    outcome.truncated = True
                    break

                similarity = self.scorer.score(primary, candidate)
                outcome.comparisons += 1

                duplicate = self._make_candidate(primary, candidate, similarity)
                if duplicate is None:
                    continue

                duplicates.append(duplicate)
                processed.add(candidate.id)
                outcome.match_counts[duplicate.match_type] += 1

            if duplicates:
                outcome.groups.append(self._make_group(primary, duplicates))
                processed.add(primary.id)

        return outcome

    def _budget_exhausted(self, comparisons: int) -> bool:
        budget = self.config.max_comparisons
        return budget is not None and comparisons >= budget

    def _make_candidate(
        self,
        primary: BaseMetadata,
        candidate: BaseMetadata,
        similarity: SimilarityResult,
    ) -> Optional[DuplicateCandidate]:
        match_type = self.classifier.classify(similarity.score)
        if match_type is None:
            return None

        return DuplicateCandidate(
            id=candidate.id,
            metadata=candidate,
            similarity_score=similarity.score,
            match_type=match_type,
            matched_fields=similarity.matched_fields,
            confidence=self.confidence.calculate(primary, candidate, similarity.score),
        )

    def _make_group(
        self, primary: BaseMetadata, duplicates: List[DuplicateCandidate]
    ) -> DuplicateGroup:
        members = [primary] + [d.metadata for d in duplicates]
        quality = round(sum(m.quality_score for m in members) / len(members))

        group = DuplicateGroup(
            id=f"group_{primary.id}",
            primary=primary,
            duplicates=duplicates,
            merge_strategy=select_merge_strategy(primary, self.catalog),
            quality_score=quality,
            total_items=len(duplicates) + 1,
        )

        logger.debug(
            "duplicate_group_created",
            group_id=group.id,
            duplicates=len(duplicates),
            merge_strategy=group.merge_strategy.value,
        )
        return group


class _UnionFind:
    """Disjoint sets over record positions, path compression + union by rank."""

    def __init__(self, size: int):
        self._parent = list(range(size))
        self._rank = [0] * size

    def find(self, x: int) -> int:
        root = x
        while self._parent[root] != root:
            root = self._parent[root]

        while self._parent[x] != root:
            self._parent[x], x = root, self._parent[x]

        return root

    def union(self, x: int, y: int) -> bool:
        root_x = self.find(x)
        root_y = self.find(y)
        if root_x == root_y:
            return False

        if self._rank[root_x] < self._rank[root_y]:
            root_x, root_y = root_y, root_x
        self._parent[root_y] = root_x
        if self._rank[root_x] == self._rank[root_y]:
            self._rank[root_x] += 1
        return True


class TransitiveGroupBuilder(GroupBuilder):
    """
    Transitive clustering variant.

    Not a drop-in replacement for GroupBuilder: in ambiguous chains the
    primary is always the earliest cluster member, and a duplicate may sit
    in a group whose primary it does not match directly. Such duplicates are
    reported with their strongest link inside the cluster.
    """

    def build(self, items: Sequence[BaseMetadata]) -> GroupingOutcome:
        outcome = GroupingOutcome()

        # First occurrence of each id; repeated ids are never grouped twice
        positions: List[int] = []
        seen_ids: set = set()
        for index, item in enumerate(items):
            if item.id not in seen_ids:
                seen_ids.add(item.id)
                positions.append(index)

        clusters = _UnionFind(len(items))
        pair_scores: Dict[Tuple[int, int], SimilarityResult] = {}
        best_link: Dict[int, SimilarityResult] = {}

        for offset, i in enumerate(positions):
            if outcome.truncated:
                break
            for j in positions[offset + 1 :]:
                if self._budget_exhausted(outcome.comparisons):
                    outcome.truncated = True
                    break

                similarity = self.scorer.score(items[i], items[j])
                outcome.comparisons += 1
                pair_scores[(i, j)] = similarity

                if not self.classifier.is_candidate(similarity.score):
                    continue

                clusters.union(i, j)
                for node in (i, j):
                    current = best_link.get(node)
                    if current is None or similarity.score > current.score:
                        best_link[node] = similarity

        members: Dict[int, List[int]] = defaultdict(list)
        for index in positions:
            members[clusters.find(index)].append(index)

        for cluster in sorted(members.values(), key=lambda c: c[0]):
            if len(cluster) < 2:
                continue

            primary_index = cluster[0]
            primary = items[primary_index]
            duplicates: List[DuplicateCandidate] = []

            for index in cluster[1:]:
                similarity = pair_scores.get((primary_index, index))
                if similarity is None or not self.classifier.is_candidate(
                    similarity.score
                ):
                    similarity = best_link[index]

                duplicate = self._make_candidate(primary, items[index], similarity)
                if duplicate is not None:
                    duplicates.append(duplicate)
                    outcome.match_counts[duplicate.match_type] += 1

            if duplicates:
                outcome.groups.append(self._make_group(primary, duplicates))

        return outcome
