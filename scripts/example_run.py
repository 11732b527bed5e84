import random
import sys
from pathlib import Path

from game import GameSession, get_settings, setup_logging
from rulery import CheckedGameRules, load_checked

DEFAULT_RULES = Path(__file__).resolve().parents[1] / "assets" / "rules" / "corner_race.json"

def main():
    settings = get_settings()
    logger = setup_logging(settings.log_level)
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else settings.rules_path or DEFAULT_RULES
    rules = load_checked(path) if path.exists() else CheckedGameRules.default()
    session = GameSession(rules, policy=settings.outcome_policy)
    rng = random.Random(42)

    logger.info("Session reset: %s", session.observation())

    for _ in range(200):
        if session.is_over:
            break
        color = session.current_color
        own = [piece.pos for piece in session.pieces if piece.color == color]
        rng.shuffle(own)
        moved = False
        for pos in own:
            moving = session.select_piece(pos)
            if moving.movable:
                session.move_to(rng.choice(sorted(moving.movable)))
                moved = True
                break
            session.cancel()
        if not moved:
            logger.info("%s cannot move; stopping", color)
            break
        logger.info("%s | %s", session.turn_message(), session.players.player_states_message())

    logger.info("Final state hash: %s", session.state_hash())

if __name__ == "__main__":
    main()
