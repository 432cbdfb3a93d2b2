# institution_recommender/id3.py
"""
ID3 decision tree over categorical records.

Records are plain dicts (attribute -> string value). Every value is an opaque
token: "2.8-3.6" is one category, not a range. Nothing here does I/O and nothing
raises on well-formed input; entropy of an empty record set is 0.
"""
import numpy as np


# -------------------------
# Tree nodes
# -------------------------
class Leaf:
    """Terminal node holding a class label."""

    __slots__ = ('label',)

    def __init__(self, label):
        object.__setattr__(self, 'label', label)

    def __setattr__(self, name, value):
        raise AttributeError("tree nodes are immutable")

    def __eq__(self, other):
        return isinstance(other, Leaf) and self.label == other.label

    def __hash__(self):
        return hash(('leaf', self.label))

    def __repr__(self):
        return f"Leaf({self.label!r})"

    def to_dict(self):
        return {'type': 'leaf', 'class': self.label}


class Node:
    """Internal node: splitting attribute plus observed value -> child."""

    __slots__ = ('attribute', 'children')

    def __init__(self, attribute, children):
        object.__setattr__(self, 'attribute', attribute)
        object.__setattr__(self, 'children', dict(children))

    def __setattr__(self, name, value):
        raise AttributeError("tree nodes are immutable")

    def __eq__(self, other):
        return (isinstance(other, Node)
                and self.attribute == other.attribute
                and self.children == other.children)

    def __hash__(self):
        return hash(('node', self.attribute, tuple(self.children)))

    def __repr__(self):
        return f"Node({self.attribute!r}, {self.children!r})"

    def to_dict(self):
        return {
            'type': 'node',
            'attribute': self.attribute,
            'children': {value: child.to_dict() for value, child in self.children.items()},
        }


def tree_depth(tree):
    """Number of splits on the longest root-to-leaf path (a bare leaf is 0)."""
    if isinstance(tree, Leaf):
        return 0
    return 1 + max((tree_depth(child) for child in tree.children.values()), default=0)


def count_leaves(tree):
    if isinstance(tree, Leaf):
        return 1
    return sum(count_leaves(child) for child in tree.children.values())


# -------------------------
# Entropy / gain
# -------------------------
def frequencies(records, attribute):
    """Count each distinct value of `attribute`; keys keep first-seen order."""
    counts = {}
    for record in records:
        value = record.get(attribute)
        counts[value] = counts.get(value, 0) + 1
    return counts


def entropy(records, target_attr):
    if not records:
        return 0.0
    counts = np.fromiter(frequencies(records, target_attr).values(), dtype=float)
    # only observed classes are present, so log2(0) never happens
    p = counts / len(records)
    return float(-(p * np.log2(p)).sum())


def partition(records, attribute):
    """Group records by their value for `attribute` (one subset per distinct value)."""
    subsets = {}
    for record in records:
        subsets.setdefault(record.get(attribute), []).append(record)
    return subsets


def information_gain(records, attribute, target_attr):
    total = len(records)
    if total == 0:
        return 0.0
    remainder = 0.0
    for subset in partition(records, attribute).values():
        remainder += (len(subset) / total) * entropy(subset, target_attr)
    return entropy(records, target_attr) - remainder


def best_split_attribute(records, attributes, target_attr):
    """
    Attribute with the highest information gain.
    Ties go to the earliest attribute in `attributes`: a later candidate only
    replaces the current best when its gain is strictly greater.
    """
    max_gain = float('-inf')
    best = None
    for attribute in attributes:
        gain = information_gain(records, attribute, target_attr)
        if gain > max_gain:
            max_gain = gain
            best = attribute
    return best


def majority_class(records, target_attr):
    """Most frequent target value; ties resolve to the label seen first in `records`."""
    best_label = None
    best_count = -1
    for label, count in frequencies(records, target_attr).items():
        if count > best_count:
            best_label, best_count = label, count
    return best_label


# -------------------------
# Induction
# -------------------------
def build_tree(records, attributes, target_attr):
    """
    Grow an ID3 tree.

    - pure subset -> Leaf with that label
    - no attributes left, or no usable split -> majority Leaf
    - otherwise split on the best attribute and recurse without it
    """
    if entropy(records, target_attr) == 0:
        return Leaf(records[0][target_attr]) if records else Leaf(None)

    if not attributes:
        return Leaf(majority_class(records, target_attr))

    best = best_split_attribute(records, attributes, target_attr)
    if best is None:
        return Leaf(majority_class(records, target_attr))

    remaining = [a for a in attributes if a != best]
    children = {}
    for value, subset in partition(records, best).items():
        if not subset:
            children[value] = Leaf(majority_class(records, target_attr))
        else:
            children[value] = build_tree(subset, remaining, target_attr)
    return Node(best, children)


# -------------------------
# Inference
# -------------------------
def classify(tree, record, fallback_records=None, target_attr=None):
    """
    Walk `tree` with `record`.

    An attribute value never seen at a branch returns the majority label of the
    whole `fallback_records` set (not the local subtree) when both fallback
    arguments are given, otherwise None.
    """
    node = tree
    while isinstance(node, Node):
        child = node.children.get(record.get(node.attribute))
        if child is None:
            if fallback_records and target_attr:
                return majority_class(fallback_records, target_attr)
            return None
        node = child
    return node.label


def predict(record, training_records, target_attr, excluded=()):
    """Build a tree from scratch over `training_records` and classify `record` with fallback."""
    if not training_records:
        return None
    attributes = [a for a in training_records[0] if a != target_attr and a not in excluded]
    tree = build_tree(training_records, attributes, target_attr)
    return classify(tree, record, training_records, target_attr)
