"""Core engine components: evaluator, search, opening table, move selection."""

from .evaluator import Evaluator
from .opening import OpeningTable
from .search import SearchEngine, SearchResult
from .selector import CandidateMove, MoveSelector
