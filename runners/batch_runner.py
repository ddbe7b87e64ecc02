"""
Batch Runner - Compare many pieces against many targets concurrently.

Every (candidate, target) pair is an independent job: similarity test,
best alignment angle, and overlap at that angle. Pieces are immutable and
the kernels release the GIL, so jobs run in a thread pool without locks.
Cost is controlled by BatchConfig.angle_steps and sample_density.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
from concurrent.futures import ThreadPoolExecutor, as_completed
import os
import time

from tqdm import tqdm

from config import BatchConfig
from geometry.comparator import alignment_overlap, find_optimal_alignment, shapes_similar
from pieces.piece import Piece
from utils.logging_utils import get_logger

logger = get_logger(__name__)


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass
class ComparisonResult:
    """Result of comparing one candidate piece with one target piece."""
    candidate_index: int
    target_index: int
    candidate_id: str
    target_id: str
    similar: bool
    best_angle: float      # radians, rotation of candidate about its centroid
    overlap: float         # fraction of target covered at best_angle
    time_seconds: float

    def to_dict(self) -> Dict:
        return {
            'candidate_index': self.candidate_index,
            'target_index': self.target_index,
            'candidate_id': self.candidate_id,
            'target_id': self.target_id,
            'similar': self.similar,
            'best_angle': self.best_angle,
            'overlap': self.overlap,
            'time_seconds': self.time_seconds,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> 'ComparisonResult':
        return cls(
            candidate_index=d['candidate_index'],
            target_index=d['target_index'],
            candidate_id=d['candidate_id'],
            target_id=d['target_id'],
            similar=d['similar'],
            best_angle=d['best_angle'],
            overlap=d['overlap'],
            time_seconds=d.get('time_seconds', 0.0),
        )


# =============================================================================
# SINGLE PAIR
# =============================================================================

def compare_pair(
    candidate_index: int,
    candidate: Piece,
    target_index: int,
    target: Piece,
    config: BatchConfig,
) -> ComparisonResult:
    """
    Compare one candidate with one target.

    Called by the pool workers.
    """
    start_time = time.time()

    target_vertices = target.world_vertices()
    candidate_vertices = candidate.world_vertices()

    similar = shapes_similar(target_vertices, candidate_vertices, config.similarity_tolerance)
    best_angle = find_optimal_alignment(
        target_vertices, candidate_vertices, config.angle_steps, config.sample_density
    )
    overlap = alignment_overlap(target_vertices, candidate_vertices, best_angle, config.sample_density)

    return ComparisonResult(
        candidate_index=candidate_index,
        target_index=target_index,
        candidate_id=str(candidate.id),
        target_id=str(target.id),
        similar=similar,
        best_angle=best_angle,
        overlap=overlap,
        time_seconds=time.time() - start_time,
    )


# =============================================================================
# BATCH COMPARATOR
# =============================================================================

class BatchComparator:
    """
    Runs candidate x target comparisons in parallel.

    Example:
        comparator = BatchComparator(BatchConfig(n_workers=4))
        results = comparator.compare_all(placed_pieces, target_pieces)
        matches = comparator.best_matches(results)
    """

    def __init__(self, config: BatchConfig = None):
        self.config = config or BatchConfig()

        if self.config.n_workers is None:
            self.config.n_workers = os.cpu_count() or 1

    def compare_all(
        self,
        candidates: Sequence[Piece],
        targets: Sequence[Piece],
    ) -> List[ComparisonResult]:
        """
        Compare every candidate with every target.

        Returns:
            Results sorted by (candidate_index, target_index)
        """
        cfg = self.config
        start_time = time.time()

        tasks = [
            (ci, candidate, ti, target)
            for ci, candidate in enumerate(candidates)
            for ti, target in enumerate(targets)
        ]

        if cfg.verbose:
            logger.info(
                "Comparing %d candidates x %d targets (%d pairs) on %d workers",
                len(candidates), len(targets), len(tasks), cfg.n_workers,
            )

        if not tasks:
            return []

        results: List[ComparisonResult] = []

        pbar = tqdm(total=len(tasks), desc="Comparing") if cfg.progress_bar else None

        with ThreadPoolExecutor(max_workers=cfg.n_workers) as executor:
            future_to_pair = {
                executor.submit(compare_pair, ci, candidate, ti, target, cfg): (ci, ti)
                for ci, candidate, ti, target in tasks
            }

            for future in as_completed(future_to_pair):
                result = future.result()
                results.append(result)

                if pbar is not None:
                    pbar.update(1)
                    pbar.set_postfix({'overlap': f'{result.overlap:.3f}'})

        if pbar is not None:
            pbar.close()

        results.sort(key=lambda r: (r.candidate_index, r.target_index))

        if cfg.verbose:
            logger.info("Compared %d pairs in %.2fs", len(results), time.time() - start_time)

        return results

    @staticmethod
    def best_matches(
        results: Sequence[ComparisonResult],
        min_overlap: float = 0.0,
        require_similar: bool = True,
    ) -> Dict[int, Optional[ComparisonResult]]:
        """
        Best target for each candidate.

        Args:
            results: Output of compare_all()
            min_overlap: Discard matches at or below this overlap
            require_similar: Only consider pairs that passed shapes_similar

        Returns:
            Dict mapping candidate_index -> best result (or None)
        """
        best: Dict[int, Optional[ComparisonResult]] = {}
        for r in results:
            best.setdefault(r.candidate_index, None)
            if require_similar and not r.similar:
                continue
            if r.overlap <= min_overlap:
                continue
            current = best[r.candidate_index]
            if current is None or r.overlap > current.overlap:
                best[r.candidate_index] = r
        return best

    @staticmethod
    def similar_pairs(results: Sequence[ComparisonResult]) -> List[Tuple[int, int]]:
        """(candidate_index, target_index) pairs that are similar shapes."""
        return [(r.candidate_index, r.target_index) for r in results if r.similar]
