"""PettingZoo AEC environment for chopsticks.

This module provides a PettingZoo AEC (Agent Environment Cycle) environment
wrapper over the game engine, supporting:
- reset(), step(), observe(), agent_iter() interface
- Actions are serials of the numbering scheme (moves.action_encoding)
- Observation with seat-ordered hands and a legal action mask
- Sparse reward only at game end: +1 for the winner, -1 for everyone else
- Known cycles and the turn cap end the game as a truncation with reward 0
"""

from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from gymnasium import spaces
from pettingzoo import AECEnv

from chopsticks.rules import ChopsticksConfig, DEFAULT_CONFIG, known_cycles
from chopsticks.engine.game_state import GameState, Over
from chopsticks.moves.action_encoding import decode_action, get_action_mask


DEFAULT_MAX_TURNS = 200

WIN_REWARD = 1.0
LOSS_REWARD = -1.0


def encode_hands_observation(state: GameState, observer_id: int) -> np.ndarray:
    """Encode every player's hands, starting from the observer's seat.

    Args:
        state: Current game state
        observer_id: Id of the observing player

    Returns:
        np.ndarray of shape (n_players, n_hands); row k belongs to player
        ``(observer_id + k) % n_players``; eliminated players are all zeros
    """
    config = state.config
    hands = np.zeros((config.n_players, config.n_hands), dtype=np.int64)
    for player in state.players:
        row = (player.player_id - observer_id) % config.n_players
        hands[row] = player.hands
    return hands


class ChopsticksAECEnv(AECEnv):
    """PettingZoo AEC environment for chopsticks.

    Observation space (Dict):
        - "hands": hands of every player, observer first (n_players, n_hands)
        - "action_mask": mask of legal action serials (action_serial_base,)

    Action space: Discrete(action_serial_base)
    """

    metadata = {
        "render_modes": ["human", "ansi"],
        "name": "chopsticks_v0",
        "is_parallelizable": False,
    }

    def __init__(
        self,
        config: Optional[ChopsticksConfig] = None,
        max_turns: Optional[int] = DEFAULT_MAX_TURNS,
        render_mode: Optional[str] = None,
    ):
        """Initialize the environment.

        Args:
            config: Rule configuration (default: DEFAULT_CONFIG)
            max_turns: Turn cap before the game is truncated (None = no cap)
            render_mode: Render mode ("human", "ansi", or None)
        """
        super().__init__()
        self.config = config or DEFAULT_CONFIG
        self.max_turns = max_turns
        self.render_mode = render_mode
        self._known_cycles = known_cycles(self.config)

        self.possible_agents = [f"player_{i}" for i in range(self.config.n_players)]
        self.agent_name_mapping = {agent: i for i, agent in enumerate(self.possible_agents)}

        n_actions = self.config.action_serial_base
        self._action_spaces = {agent: spaces.Discrete(n_actions) for agent in self.possible_agents}
        self._observation_spaces = {
            agent: spaces.Dict(
                {
                    "hands": spaces.Box(
                        low=0,
                        high=self.config.rollover - 1,
                        shape=(self.config.n_players, self.config.n_hands),
                        dtype=np.int64,
                    ),
                    "action_mask": spaces.Box(low=0, high=1, shape=(n_actions,), dtype=np.int8),
                }
            )
            for agent in self.possible_agents
        }

        self._game_state: Optional[GameState] = None
        self._turns = 0
        self._current_agent: str = self.possible_agents[0]

        self.agents: List[str] = []
        self.rewards: Dict[str, float] = {}
        self._cumulative_rewards: Dict[str, float] = {}
        self.terminations: Dict[str, bool] = {}
        self.truncations: Dict[str, bool] = {}
        self.infos: Dict[str, Dict[str, Any]] = {}

    @property
    def agent_selection(self) -> str:
        """Get the currently selected agent."""
        return self._current_agent

    @agent_selection.setter
    def agent_selection(self, agent: str) -> None:
        self._current_agent = agent

    @property
    def game_state(self) -> Optional[GameState]:
        return self._game_state

    def observation_space(self, agent: str) -> spaces.Dict:
        """Get observation space for an agent."""
        return self._observation_spaces[agent]

    def action_space(self, agent: str) -> spaces.Discrete:
        """Get action space for an agent."""
        return self._action_spaces[agent]

    def reset(
        self,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Reset the environment.

        Args:
            seed: Unused; the game itself has no randomness
            options: Optional reset options. ``{"hands": ..., "mover_id": ...}``
                starts from the given seat-indexed hands instead of a new game

        Raises:
            ValueError: If the given hands do not fit the configuration
        """
        options = options or {}
        if "hands" in options:
            self._game_state = GameState.from_hands(
                options["hands"], config=self.config, mover_id=options.get("mover_id", 0)
            )
        else:
            self._game_state = GameState.new_game(self.config)
        self._turns = 0

        self.agents = list(self.possible_agents)
        self.rewards = {agent: 0.0 for agent in self.agents}
        self._cumulative_rewards = {agent: 0.0 for agent in self.agents}
        self.terminations = {agent: False for agent in self.agents}
        self.truncations = {agent: False for agent in self.agents}
        self.infos = {agent: {} for agent in self.agents}

        self._select_mover()

    def step(self, action: Optional[int]) -> None:
        """Execute an action for the current agent.

        Args:
            action: Action serial, or None if the agent is done

        Raises:
            RuntimeError: If reset() was not called
            ValueError: If the action is None or masked for an active agent
        """
        if self._game_state is None:
            raise RuntimeError("Must call reset() before step()")

        agent = self.agent_selection
        if self.terminations[agent] or self.truncations[agent]:
            self._was_dead_step(action)
            return

        if action is None:
            raise ValueError(f"Action cannot be None for active agent {agent}")

        action_mask = get_action_mask(self._game_state)
        if not 0 <= int(action) < len(action_mask) or not action_mask[int(action)]:
            raise ValueError(f"Action {action} is masked (illegal) for {agent}")

        self._game_state.play_action(decode_action(int(action), self.config))
        self._turns += 1

        for a in self.agents:
            self.rewards[a] = 0.0

        status = self._game_state.status()
        if isinstance(status, Over):
            self._handle_game_over(status.winner_id)
        elif self._game_state.abbreviation() in self._known_cycles:
            self._handle_truncation()
        elif self.max_turns is not None and self._turns >= self.max_turns:
            self._handle_truncation()
        else:
            self._select_mover()

    def _was_dead_step(self, action: Optional[int]) -> None:
        """Handle step for a dead (terminated/truncated) agent."""
        agent = self.agent_selection
        if agent in self.agents:
            self.agents.remove(agent)
        self.rewards[agent] = 0.0
        if self.agents:
            self._current_agent = self.agents[0]

    def _handle_game_over(self, winner_id: int) -> None:
        """Assign final rewards and terminate every agent."""
        for agent in self.possible_agents:
            player_id = self.agent_name_mapping[agent]
            self.rewards[agent] = WIN_REWARD if player_id == winner_id else LOSS_REWARD
            self._cumulative_rewards[agent] += self.rewards[agent]
            self.terminations[agent] = True
        self._current_agent = self.agents[0]

    def _handle_truncation(self) -> None:
        """End the game without a winner."""
        for agent in self.possible_agents:
            self.truncations[agent] = True
        self._current_agent = self.agents[0]

    def _select_mover(self) -> None:
        mover_id = self._game_state.players[0].player_id
        self._current_agent = self.possible_agents[mover_id]

    def observe(self, agent: str) -> Dict[str, np.ndarray]:
        """Get observation for an agent.

        Args:
            agent: Agent name

        Returns:
            Observation dict with hands and action_mask
        """
        n_actions = self.config.action_serial_base
        if self._game_state is None:
            return {
                "hands": np.zeros((self.config.n_players, self.config.n_hands), dtype=np.int64),
                "action_mask": np.zeros(n_actions, dtype=np.int8),
            }

        player_id = self.agent_name_mapping[agent]
        hands = encode_hands_observation(self._game_state, player_id)

        if self._is_to_move(agent):
            action_mask = get_action_mask(self._game_state).astype(np.int8)
        else:
            action_mask = np.zeros(n_actions, dtype=np.int8)

        return {"hands": hands, "action_mask": action_mask}

    def _is_to_move(self, agent: str) -> bool:
        if self.terminations.get(agent, False) or self.truncations.get(agent, False):
            return False
        return self._game_state.players[0].player_id == self.agent_name_mapping[agent]

    def _get_info(self, agent: str) -> Dict[str, Any]:
        """Get info dict for an agent."""
        if self._game_state is None:
            return {}
        return {
            "abbreviation": self._game_state.abbreviation(),
            "turns": self._turns,
            "eliminated": self._game_state.get_player(self.agent_name_mapping[agent]) is None,
        }

    def last(
        self,
        observe: bool = True,
    ) -> Tuple[Optional[Dict[str, np.ndarray]], float, bool, bool, Dict[str, Any]]:
        """Get the last observation, reward, termination, truncation, info.

        Args:
            observe: If True, return observation; otherwise return None

        Returns:
            Tuple of (observation, reward, termination, truncation, info)
        """
        agent = self.agent_selection

        observation = self.observe(agent) if observe else None
        reward = self._cumulative_rewards.get(agent, 0.0)
        termination = self.terminations.get(agent, False)
        truncation = self.truncations.get(agent, False)
        info = self._get_info(agent)

        return observation, reward, termination, truncation, info

    def render(self) -> Optional[str]:
        """Render the environment.

        Returns:
            The abbreviation if render_mode is "ansi" or "human", None otherwise
        """
        if self._game_state is None:
            return None

        if self.render_mode in ("human", "ansi"):
            output = str(self._game_state)
            if self.render_mode == "human":
                print(output)
            return output

        return None

    def close(self) -> None:
        """Clean up environment resources."""
        self._game_state = None


def env(**kwargs) -> ChopsticksAECEnv:
    """Create a ChopsticksAECEnv environment.

    Args:
        **kwargs: Keyword arguments passed to ChopsticksAECEnv.__init__

    Returns:
        ChopsticksAECEnv instance
    """
    return ChopsticksAECEnv(**kwargs)
