# filename: huffman_core.py

import heapq
from collections import Counter
from itertools import count


class HuffmanLeaf:
    __slots__ = ("symbol", "freq")

    def __init__(self, symbol, freq=0):
        self.symbol = symbol
        self.freq = freq

    def __repr__(self):
        return f"HuffmanLeaf({self.symbol!r}, {self.freq})"


class HuffmanInternal:
    """Branching node. Encoder trees always fill both children; a tree
    rebuilt from codes may leave one of them empty."""

    __slots__ = ("freq", "left", "right")

    def __init__(self, freq=0, left=None, right=None):
        self.freq = freq
        self.left = left
        self.right = right

    def child(self, bit):
        return self.left if bit == "0" else self.right

    def set_child(self, bit, node):
        if bit == "0":
            self.left = node
        else:
            self.right = node

    def __repr__(self):
        return f"HuffmanInternal({self.freq}, {self.left!r}, {self.right!r})"


class HuffmanLogic:
    def count_frequencies(self, data):
        # Frequency analysis of the input byte data
        return Counter(data)

    def build_tree(self, freqs):
        if not freqs:
            return None

        # Leaves go in by ascending symbol and merged nodes take the next
        # sequence number, so equal frequencies always pop in the same order.
        order = count()
        priority_queue = [
            (freq, next(order), HuffmanLeaf(symbol, freq))
            for symbol, freq in sorted(freqs.items())
        ]
        heapq.heapify(priority_queue)

        # Iteratively merge nodes to form the binary tree
        while len(priority_queue) > 1:
            left_freq, _, left = heapq.heappop(priority_queue)
            right_freq, _, right = heapq.heappop(priority_queue)
            merged = HuffmanInternal(left_freq + right_freq, left, right)
            heapq.heappush(priority_queue, (merged.freq, next(order), merged))

        return priority_queue[0][2]

    def generate_codes(self, node):
        codes = {}
        if node is None:
            return codes

        # A lone leaf would get the empty code; give it a single bit instead.
        if isinstance(node, HuffmanLeaf):
            codes[node.symbol] = "0"
            return codes

        stack = [(node, "")]
        while stack:
            current, code = stack.pop()
            if isinstance(current, HuffmanLeaf):
                codes[current.symbol] = code
                continue
            if current.right is not None:
                stack.append((current.right, code + "1"))
            if current.left is not None:
                stack.append((current.left, code + "0"))
        return codes

    def build_codebook(self, data):
        return self.generate_codes(self.build_tree(self.count_frequencies(data)))
