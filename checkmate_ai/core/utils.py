from typing import Optional

import chess


def format_info(depth: int, score: int, nodes: int, elapsed: float, move: Optional[chess.Move], mate_score: int) -> str:
        move_str = move.uci() if move else "-"
        nps = int(nodes / elapsed) if elapsed > 0 else 0

        if abs(score) > mate_score - 100:
            mate_in = (mate_score - abs(score) + 1) // 2
            score_str = f"mate {mate_in if score > 0 else -mate_in}"
        else:
            score_str = f"cp {score}"

        return f"info depth {depth} score {score_str} nodes {nodes} nps {nps} time {int(elapsed * 1000)} bestmove {move_str}"
