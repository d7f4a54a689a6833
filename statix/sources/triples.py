"""
Similarity source over a line-oriented triples file.

Each non-comment line holds a statement ``<subject> <predicate> <object> .``
(N-Triples/N-Quads alike, the graph term is ignored). Type statements
(rdf:type) label the instances and are not counted as properties. Instances
are compared by their property occurrence vectors scaled with the property
weights, using the cosine or the weighted Jaccard similarity.
"""

import logging
import re
from collections import Counter, defaultdict
from collections.abc import Iterator, Sequence
from pathlib import Path

import numpy as np
from sklearn.feature_selection import mutual_info_classif

logger = logging.getLogger(__name__)

RDF_TYPE = "<http://www.w3.org/1999/02/22-rdf-syntax-ns#type>"

_TERM_PATTERN = re.compile(
    r'<[^>]*>|"(?:[^"\\]|\\.)*"(?:@[\w-]+|\^\^<[^>]*>)?|_:\S+|[^\s.]\S*'
)


def read_triples(
    path: str | Path, dirty: bool = False
) -> Iterator[tuple[str, str, str]]:
    """Read (subject, predicate, object) statements from the file.

    Args:
        path: Triples file name
        dirty: The data might contain duplicated statements to be skipped
    """
    seen: set[tuple[str, str, str]] = set()
    with open(path, encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            terms = _TERM_PATTERN.findall(line)
            if len(terms) < 3:
                logger.warning(f"Invalid statement at {path}:{lineno} is omitted")
                continue
            triple = (terms[0], terms[1], terms[2])
            if dirty:
                if triple in seen:
                    continue
                seen.add(triple)
            yield triple


class TripleSimilaritySource:
    """Instances of a triples file compared by their weighted properties."""

    def __init__(self):
        self._names: list[str] = []
        self._ids: dict[str, int] = {}
        self._rows: dict[str, int] = {}
        self._properties: list[str] = []
        self._counts: np.ndarray = np.zeros((0, 0))
        self._weights: dict[str, float] = {}
        self._vectors: np.ndarray | None = None
        self._norms: np.ndarray | None = None

    @property
    def property_weights(self) -> dict[str, float]:
        return self._weights

    @property_weights.setter
    def property_weights(self, weights: dict[str, float]) -> None:
        self._weights = weights
        self._vectors = None
        self._norms = None

    def instances(self) -> Sequence[str]:
        return self._names

    def instance_id(self, name: str) -> int:
        return self._ids[name]

    def load_input_data(
        self,
        path: str | Path,
        filter_untyped: bool = False,
        id_map_path: str | Path | None = None,
    ) -> dict[str, int]:
        """Load the dataset instances.

        Args:
            path: Triples file name
            filter_untyped: Invert ids of the instances having no type, so they
                can be filtered out from the clustering results
            id_map_path: Optional file name to output the instance id mapping

        Returns:
            Total number of occurrences of each property
        """
        properties: dict[str, Counter] = defaultdict(Counter)
        typed: set[str] = set()
        for subj, pred, _obj in read_triples(path):
            if pred == RDF_TYPE:
                typed.add(subj)
                properties.setdefault(subj, Counter())
            else:
                properties[subj][pred] += 1

        self._names = list(properties)
        self._rows = {name: i for i, name in enumerate(self._names)}
        self._ids = {
            name: ~i if filter_untyped and name not in typed else i
            for i, name in enumerate(self._names)
        }
        occurrences: Counter = Counter()
        for props in properties.values():
            occurrences.update(props)
        self._properties = sorted(occurrences)
        columns = {prop: j for j, prop in enumerate(self._properties)}
        self._counts = np.zeros((len(self._names), len(self._properties)))
        for name, props in properties.items():
            for prop, ocrs in props.items():
                self._counts[self._rows[name], columns[prop]] = ocrs
        self.property_weights = {}

        logger.info(
            f"Loaded {len(self._names)} instances ({len(typed)} typed) with "
            f"{len(self._properties)} properties from {path}"
        )
        if id_map_path is not None:
            with open(id_map_path, "w", encoding="utf-8") as f:
                f.write("# Id\tName\n")
                for name in self._names:
                    f.write(f"{self._ids[name]}\t{name}\n")
        return dict(occurrences)

    def load_gt_data(
        self, path: str | Path, target_properties: dict[str, int], dirty: bool = False
    ) -> dict[str, float]:
        """Learn the weights of the target properties from the labeled data.

        The weight of a property is the mutual information of its presence and
        the instance type normalized by the type entropy.

        Args:
            path: Labeled triples file name
            target_properties: Properties to be weighted
            dirty: The data might contain duplicated statements

        Returns:
            Learned property weights E [0, 1]
        """
        labels: dict[str, str] = {}
        present: dict[str, set[str]] = defaultdict(set)
        for subj, pred, obj in read_triples(path, dirty):
            if pred == RDF_TYPE:
                # The least type is used for the instances having multiple types
                if subj not in labels or obj < labels[subj]:
                    labels[subj] = obj
            elif pred in target_properties:
                present[subj].add(pred)

        targets = sorted(target_properties)
        if not targets or len(set(labels.values())) < 2:
            logger.warning(
                f"The property weights can't be learned from {path}: "
                f"{len(set(labels.values()))} types, {len(targets)} target properties"
            )
            return {}

        names = sorted(labels)
        features = np.array(
            [[prop in present[name] for prop in targets] for name in names], dtype=int
        )
        y = np.array([labels[name] for name in names])
        _, type_counts = np.unique(y, return_counts=True)
        probs = type_counts / type_counts.sum()
        entropy = float(-np.sum(probs * np.log(probs)))

        mi = mutual_info_classif(features, y, discrete_features=True, random_state=0)
        weights = np.clip(mi / entropy, 0.0, 1.0)
        logger.info(f"Learned {len(targets)} property weights from {len(names)} instances")
        return {prop: float(w) for prop, w in zip(targets, weights, strict=True)}

    def _weighted_vectors(self) -> tuple[np.ndarray, np.ndarray]:
        if self._vectors is None:
            scale = np.array(
                [self._weights.get(prop, 1.0) for prop in self._properties]
            )
            self._vectors = self._counts * scale
            self._norms = np.linalg.norm(self._vectors, axis=1)
        return self._vectors, self._norms

    def similarity(self, a: str, b: str, jaccard: bool = False) -> float:
        vectors, norms = self._weighted_vectors()
        va = vectors[self._rows[a]]
        vb = vectors[self._rows[b]]
        if jaccard:
            denom = float(np.maximum(va, vb).sum())
            return float(np.minimum(va, vb).sum()) / denom if denom > 0 else 0.0

        denom = float(norms[self._rows[a]] * norms[self._rows[b]])
        if denom <= 0:
            return 0.0
        return min(1.0, max(0.0, float(va @ vb) / denom))
