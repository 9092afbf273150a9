"""Contour classification and hole-to-outer pairing.

This module analyzes flattened text contours to identify:
- Outer contours (counter-clockwise winding, strictly positive area)
- Holes (everything else, including zero-area contours)
- The outer contour that owns each hole

The analysis uses signed area calculation to determine winding direction
and a point-in-polygon test of one representative vertex per hole to
establish containment.
"""

from dataclasses import dataclass, field

from mammaltag.domain import ClassifiedContour, Contour, ContourGroup, ContourRole


@dataclass
class ContourClassification:
    """Result of classifying a set of contours.

    Attributes:
        classified: One entry per input contour, in input order. A hole's
            `owner` indexes this list; it is None when no outer contains it.
        groups: One group per outer contour, in input order, holding the
            holes assigned to it. Unowned holes appear in no group.
    """

    classified: list[ClassifiedContour] = field(default_factory=list)
    groups: list[ContourGroup] = field(default_factory=list)

    @property
    def outer_count(self) -> int:
        return len(self.groups)

    @property
    def hole_count(self) -> int:
        return sum(1 for c in self.classified if not c.is_outer)

    @property
    def dropped_holes(self) -> int:
        """Holes that matched no outer contour."""
        return sum(1 for c in self.classified if not c.is_outer and c.owner is None)


class ContourAnalyzer:
    """Classifies contours as outer or hole and pairs holes with outers.

    The analyzer is stateless. Pairing is a single O(holes x outers) pass,
    which is fine at character-outline scale.
    """

    def classify(self, contours: list[Contour]) -> ContourClassification:
        """Classify contours and assign each hole to its containing outer.

        Process:
        1. Classify by signed area (> 0 outer, otherwise hole)
        2. For each hole, test its first vertex against every outer in order
        3. Assign the hole to the first outer that contains it, else drop it

        Args:
            contours: Closed contours to classify

        Returns:
            ContourClassification with per-contour roles and outer groups
        """
        if not contours:
            return ContourClassification()

        outer_indices: list[int] = []
        classified: list[ClassifiedContour] = []

        for idx, contour in enumerate(contours):
            if contour.signed_area() > 0:
                outer_indices.append(idx)
                classified.append(ClassifiedContour(contour=contour, role=ContourRole.OUTER))
            else:
                classified.append(ClassifiedContour(contour=contour, role=ContourRole.HOLE))

        groups_by_outer: dict[int, ContourGroup] = {
            idx: ContourGroup(outer=contours[idx]) for idx in outer_indices
        }

        for item in classified:
            if item.is_outer:
                continue

            owner = self._owner_of(item.contour, contours, outer_indices)
            item.owner = owner
            if owner is not None:
                groups_by_outer[owner].holes.append(item.contour)

        return ContourClassification(
            classified=classified,
            groups=[groups_by_outer[idx] for idx in outer_indices],
        )

    def _owner_of(
        self,
        hole: Contour,
        contours: list[Contour],
        outer_indices: list[int],
    ) -> int | None:
        """Index of the outer contour a hole is cut from.

        Only the hole's first vertex is tested, and outers are tried in
        input order, so with nested outers (a ring drawn inside another
        glyph's counter) the earliest enclosing outer wins even when a
        later one fits the hole more tightly. Glyph counters never nest
        that way in practice.
        """
        if not hole.points:
            return None

        first = hole.points[0]
        return next((idx for idx in outer_indices if contours[idx].contains_point(first)), None)
