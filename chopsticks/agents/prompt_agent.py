"""Interactive console agent.

Asks a human for every action through rich prompts. Answers that cannot be
parsed are asked again by the prompt itself; actions the engine rejects are
reported and the whole action is asked again.
"""

from typing import IO, Optional

from rich.console import Console
from rich.prompt import IntPrompt, Prompt

from chopsticks.rules import Action, ActionError, Attack, Split
from chopsticks.engine.game_state import GameState
from chopsticks.agents.random_agent import require_turn


class PromptAgent:
    """Agent that reads each action from the console.

    Attributes:
        name: Agent name for identification
        console: Rich console used for prompts and messages
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        stream: Optional[IO[str]] = None,
        name: str = "PromptAgent",
    ):
        """Initialize the prompt agent.

        Args:
            console: Rich console (default: a new Console)
            stream: Input stream to read answers from (default: stdin)
            name: Agent name for identification
        """
        self.name = name
        self.console = console or Console()
        self.stream = stream

    def get_action(self, state: GameState) -> Action:
        """Prompt until the player enters an action the engine accepts.

        Raises:
            RuntimeError: If the game is over
        """
        player_id = require_turn(state)
        self._show_state(state)
        while True:
            action = self._prompt_action(state, player_id)
            try:
                state.copy().play_action(action)
            except ActionError as e:
                self.console.print(f"[red]{type(e).__name__}[/red]: {e}. Try again.")
                continue
            return action

    def reset(self) -> None:
        """Reset agent state (no-op for prompt agent)."""
        pass

    def _prompt_action(self, state: GameState, player_id: int) -> Action:
        choice = Prompt.ask(
            f"Player {player_id}, would you like to attack or split?",
            choices=["attack", "split"],
            console=self.console,
            stream=self.stream,
        )
        if choice == "attack":
            return self._prompt_attack(state, player_id)
        return self._prompt_split(state, player_id)

    def _prompt_attack(self, state: GameState, player_id: int) -> Action:
        if len(state.players) > 2:
            offset = self._ask_int(
                f"Player {player_id}, how many turns ahead is the player you are attacking?"
            )
        else:
            offset = 1
        attacking_hand = self._ask_int(f"Player {player_id}, which hand are you using to attack?")
        defending_hand = self._ask_int(f"Player {player_id}, which hand are you attacking?")
        return Attack(
            target_offset=offset,
            attacking_hand=attacking_hand,
            defending_hand=defending_hand,
        )

    def _prompt_split(self, state: GameState, player_id: int) -> Action:
        new_hands = [
            self._ask_int(f"Player {player_id}, how many fingers will you put on hand {k}?")
            for k in range(state.config.n_hands)
        ]
        return Split(new_hands=tuple(new_hands))

    def _ask_int(self, prompt: str) -> int:
        return IntPrompt.ask(prompt, console=self.console, stream=self.stream)

    def _show_state(self, state: GameState) -> None:
        for offset, player in enumerate(state.players):
            hands = " ".join(str(h) for h in player.hands)
            label = "you" if offset == 0 else f"{offset} ahead"
            self.console.print(f"  Player {player.player_id} ({label}): {hands}")
