"""
Game logic for the Discord Pairs Game (ID: 1001).

The engine is framework-free: it owns one GameSessionState, accepts commands
(select_difficulty, flip, show_hint, reset_game, reset_game_and_difficulty)
and runs its timed activities as asyncio tasks bound to the instance. The
Discord layer only reads the observable properties and listens for changes.
"""
import asyncio
import random
import logging
import traceback
from enum import Enum

from common.config import (
    PREVIEW_COUNTDOWN_SECONDS, TICK_SECONDS, WRONG_GUESS_DELAY_SECONDS,
    HINT_COOLDOWN_SECONDS, HINT_DURATION_DIVISOR, WIN_SWEEP_DWELL_SECONDS,
    MISMATCH_VIBRATION_MS, WIN_VIBRATION_MS
)
from games.game_1001_pairs.deck_1001 import build_deck
from utils.haptics import get_haptic_feedback

logger = logging.getLogger("discord_bot")

GAME_ID = "1001"

class GamePhase(Enum):
    PREVIEW = "preview"
    PLAY = "play"
    WON = "won"

class FlipOutcome(Enum):
    """What a flip command did."""
    IGNORED = "ignored"
    SELECTED = "selected"
    MATCH = "match"
    MISMATCH = "mismatch"
    WON = "won"

class GameSessionState:
    """The mutable aggregate for one pairs session.

    A new instance is created on every reset; timed tasks hold on to the
    instance they were started for.
    """
    def __init__(self, difficulty=None, countdown_seconds=PREVIEW_COUNTDOWN_SECONDS):
        self.difficulty = difficulty
        self.cards = []
        self.phase = GamePhase.PREVIEW
        self.countdown_seconds = countdown_seconds
        self.game_time_seconds = 0
        self.guess_attempts = 0
        self.matched_card_ids = set()
        self.first_selected_card = None
        self.is_processing_match = False

        # Hint state
        self.is_hint_used = False  # A hint is currently shown
        self.hint_card_ids = []
        self.hint_counter = 0
        self.next_hint_available_time = 0  # In game seconds

        # Win animation state
        self.is_win_animation_in_progress = False
        self.currently_animating_card_id = None

    @property
    def total_cards(self):
        return len(self.cards)

    def index_of(self, card_id):
        """Returns the list index of the card with this id, or None."""
        for index, card in enumerate(self.cards):
            if card.id == card_id:
                return index
        return None

    def update_card(self, card_id, **changes):
        """Replaces a card with an updated copy. Returns the copy, or None if not found."""
        index = self.index_of(card_id)
        if index is None:
            return None
        updated = self.cards[index].copy(**changes)
        self.cards[index] = updated
        return updated

class PairsGame:
    """Main game class that handles the pairs game logic and state."""
    def __init__(self, rng=None, haptics=None, countdown_start=None, tick_seconds=None,
                 wrong_guess_delay=None, hint_cooldown=None, hint_duration_divisor=None,
                 win_dwell_seconds=None):
        self.rng = rng or random.Random()
        self.haptics = haptics or get_haptic_feedback()

        # Use provided timings, or default from config
        self.countdown_start = countdown_start if countdown_start is not None else PREVIEW_COUNTDOWN_SECONDS
        self.tick_seconds = tick_seconds if tick_seconds is not None else TICK_SECONDS
        self.wrong_guess_delay = wrong_guess_delay if wrong_guess_delay is not None else WRONG_GUESS_DELAY_SECONDS
        self.hint_cooldown = hint_cooldown if hint_cooldown is not None else HINT_COOLDOWN_SECONDS
        self.hint_duration_divisor = hint_duration_divisor if hint_duration_divisor is not None else HINT_DURATION_DIVISOR
        self.win_dwell_seconds = win_dwell_seconds if win_dwell_seconds is not None else WIN_SWEEP_DWELL_SECONDS

        self.state = GameSessionState(countdown_seconds=self.countdown_start)
        self._tasks = {}  # name -> asyncio.Task, all bound to self.state
        self._listeners = []
        self._playing = asyncio.Event()

    # --- Observable state ---

    @property
    def selected_difficulty(self):
        return self.state.difficulty

    @property
    def cards(self):
        return list(self.state.cards)

    @property
    def total_cards(self):
        return self.state.total_cards

    @property
    def phase(self):
        return self.state.phase

    @property
    def is_in_preview_mode(self):
        return self.state.phase is GamePhase.PREVIEW

    @property
    def is_game_won(self):
        return self.state.phase is GamePhase.WON

    @property
    def countdown_seconds(self):
        return self.state.countdown_seconds

    @property
    def game_time_seconds(self):
        return self.state.game_time_seconds

    @property
    def guess_attempts(self):
        return self.state.guess_attempts

    @property
    def matched_card_ids(self):
        return frozenset(self.state.matched_card_ids)

    @property
    def is_hint_used(self):
        return self.state.is_hint_used

    @property
    def hint_card_ids(self):
        return list(self.state.hint_card_ids)

    @property
    def hint_counter(self):
        return self.state.hint_counter

    @property
    def next_hint_available_time(self):
        return self.state.next_hint_available_time

    @property
    def hint_cooldown_remaining(self):
        """Game seconds until the next hint may be requested."""
        return max(0, self.state.next_hint_available_time - self.state.game_time_seconds)

    @property
    def is_win_animation_in_progress(self):
        return self.state.is_win_animation_in_progress

    @property
    def currently_animating_card_id(self):
        return self.state.currently_animating_card_id

    @property
    def hint_duration_seconds(self):
        return self.hint_cooldown * self.tick_seconds / self.hint_duration_divisor

    def add_listener(self, callback):
        """Registers callback(game), called after every state change."""
        self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    async def wait_until_playing(self):
        """Waits until the current deck leaves the preview phase."""
        await self._playing.wait()

    # --- Commands ---

    def select_difficulty(self, difficulty):
        """Starts a fresh deck for the given difficulty."""
        self._start_session(difficulty)

    def reset_game(self):
        """Deals a new deck with the same difficulty."""
        if self.state.difficulty is None:
            self._clear_session()
            return
        self._start_session(self.state.difficulty)

    def reset_game_and_difficulty(self):
        """Clears the deck and the difficulty, back to difficulty selection."""
        self._clear_session()

    def flip(self, card_id):
        """Flips a face-down card.

        Returns:
            FlipOutcome: IGNORED when the command is not applicable, SELECTED for
            the first card of an attempt, MATCH / MISMATCH / WON for the second.
        """
        state = self.state
        if state.phase is not GamePhase.PLAY or state.is_processing_match:
            logger.debug(f"Flip of card {card_id} ignored in phase {state.phase.value} (processing={state.is_processing_match})")
            return FlipOutcome.IGNORED
        if card_id in state.matched_card_ids:
            return FlipOutcome.IGNORED

        index = state.index_of(card_id)
        if index is None:
            logger.debug(f"Flip of unknown card {card_id} ignored")
            return FlipOutcome.IGNORED

        card = state.cards[index]
        if card.is_flipped:
            return FlipOutcome.IGNORED

        card = card.copy(is_flipped=True, is_selected=True)
        state.cards[index] = card

        first_card = state.first_selected_card
        if first_card is None:
            state.first_selected_card = card
            self._notify()
            return FlipOutcome.SELECTED

        state.guess_attempts += 1
        state.is_processing_match = True

        if first_card.matches(card):
            return self._resolve_match(state, first_card, card)
        return self._resolve_mismatch(state, first_card, card)

    def show_hint(self):
        """Briefly reveals one unmatched pair. Returns True if a hint was shown."""
        state = self.state
        if state.is_hint_used or state.phase is not GamePhase.PLAY:
            return False
        if state.game_time_seconds < state.next_hint_available_time:
            return False

        cards_by_symbol = {}
        for card in state.cards:
            if card.id not in state.matched_card_ids:
                cards_by_symbol.setdefault(card.symbol_id, []).append(card)
        # A wrong guess on show is flipped back by the resolver before the hint ends
        unmatched_pairs = [
            cards for cards in cards_by_symbol.values()
            if len(cards) == 2 and not any(card.is_wrong_guess for card in cards)
        ]
        if not unmatched_pairs:
            return False

        selected_pair = self.rng.choice(unmatched_pairs)
        hint_card_ids = [card.id for card in selected_pair]
        for card_id in hint_card_ids:
            state.update_card(card_id, is_flipped=True)

        state.hint_card_ids = hint_card_ids
        state.hint_counter += 1
        state.next_hint_available_time = state.game_time_seconds + self.hint_cooldown
        state.is_hint_used = True
        logger.info(f"Hint {state.hint_counter} revealed cards {hint_card_ids}; next hint at {state.next_hint_available_time}s")

        self._start_task("hint", self._hide_hint_after_delay(state, hint_card_ids))
        self._notify()
        return True

    async def close(self):
        """Cancels every running task and waits for them to finish."""
        tasks = self._cancel_tasks()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.state.is_win_animation_in_progress = False
        self.state.currently_animating_card_id = None
        self._listeners.clear()

    # --- Session lifecycle ---

    def _start_session(self, difficulty):
        self._cancel_tasks()

        state = GameSessionState(difficulty=difficulty, countdown_seconds=self.countdown_start)
        state.cards = build_deck(difficulty.pair_count, rng=self.rng)
        self.state = state
        self._playing = asyncio.Event()
        logger.info(f"Pairs game created on {difficulty.name} with {state.total_cards} cards")

        self._start_task("countdown", self._run_countdown(state, self._playing))
        self._notify()

    def _clear_session(self):
        self._cancel_tasks()
        self.state = GameSessionState(countdown_seconds=self.countdown_start)
        self._playing = asyncio.Event()
        logger.info("Pairs game cleared")
        self._notify()

    # --- Match resolution ---

    def _resolve_match(self, state, first_card, second_card):
        state.matched_card_ids.update((first_card.id, second_card.id))
        state.update_card(first_card.id, is_selected=False)
        state.update_card(second_card.id, is_selected=False)
        logger.info(f"Match on attempt {state.guess_attempts}: cards {first_card.id} and {second_card.id}")

        outcome = FlipOutcome.MATCH
        if len(state.matched_card_ids) == state.total_cards:
            state.phase = GamePhase.WON
            logger.info(f"Pairs game won in {state.guess_attempts} attempts, {state.game_time_seconds}s, {state.hint_counter} hints")
            self._start_win_animation(state)
            outcome = FlipOutcome.WON

        state.first_selected_card = None
        state.is_processing_match = False
        self._notify()
        return outcome

    def _resolve_mismatch(self, state, first_card, second_card):
        state.update_card(first_card.id, is_wrong_guess=True)
        state.update_card(second_card.id, is_wrong_guess=True)
        logger.info(f"No match on attempt {state.guess_attempts}: cards {first_card.id} and {second_card.id}")

        self._start_task("mismatch", self._hide_mismatch_after_delay(state, first_card.id, second_card.id))
        self._notify()
        return FlipOutcome.MISMATCH

    async def _hide_mismatch_after_delay(self, state, first_id, second_id):
        """Flips a wrong guess back once the mismatch has been on show."""
        await asyncio.sleep(self.wrong_guess_delay)

        self._vibrate(MISMATCH_VIBRATION_MS)
        for card_id in (first_id, second_id):
            state.update_card(card_id, is_flipped=False, is_selected=False, is_wrong_guess=False)
        state.first_selected_card = None
        state.is_processing_match = False
        self._publish(state)

    # --- Timed phases ---

    async def _run_countdown(self, state, playing):
        for remaining in range(self.countdown_start, 0, -1):
            state.countdown_seconds = remaining
            self._publish(state)
            await asyncio.sleep(self.tick_seconds)

        state.cards = [card.copy(is_flipped=False) for card in state.cards]
        state.countdown_seconds = 0
        state.phase = GamePhase.PLAY
        playing.set()
        logger.info("Preview over, cards flipped face down")

        self._start_task("timer", self._run_game_timer(state))
        self._publish(state)

    async def _run_game_timer(self, state):
        state.game_time_seconds = 0
        while state.phase is GamePhase.PLAY:
            await asyncio.sleep(self.tick_seconds)
            if state.phase is not GamePhase.PLAY:
                break
            state.game_time_seconds += 1
            self._publish(state)

    async def _hide_hint_after_delay(self, state, hint_card_ids):
        await asyncio.sleep(self.hint_duration_seconds)

        # Matched cards stay up; a selected card belongs to the player's
        # pending attempt and is flipped back by the resolver instead.
        for card_id in hint_card_ids:
            index = state.index_of(card_id)
            if index is None or card_id in state.matched_card_ids:
                continue
            if state.cards[index].is_selected:
                continue
            state.cards[index] = state.cards[index].copy(is_flipped=False)

        state.hint_card_ids = []
        state.is_hint_used = False
        self._publish(state)

    def _start_win_animation(self, state):
        state.is_win_animation_in_progress = True
        self._start_task("win", self._run_win_animation(state))

    async def _run_win_animation(self, state):
        """Sweeps the highlight forward then backward over the deck until cancelled."""
        card_ids = [card.id for card in state.cards]
        if not card_ids:
            return
        sweep = card_ids + card_ids[::-1]

        while state.is_win_animation_in_progress:
            for card_id in sweep:
                state.currently_animating_card_id = card_id
                self._vibrate(WIN_VIBRATION_MS)
                self._publish(state)
                await asyncio.sleep(self.win_dwell_seconds)

    # --- Plumbing ---

    def _vibrate(self, duration_ms):
        if not self.haptics.is_supported:
            return
        try:
            self.haptics.vibrate(duration_ms)
        except Exception as e:
            logger.warning(f"Haptic feedback failed: {e}")

    def _start_task(self, name, coro):
        previous = self._tasks.pop(name, None)
        if previous is not None and not previous.done():
            previous.cancel()

        task = asyncio.create_task(coro, name=f"pairs-{name}")
        self._tasks[name] = task
        task.add_done_callback(lambda finished, name=name: self._on_task_done(name, finished))
        return task

    def _on_task_done(self, name, task):
        if self._tasks.get(name) is task:
            del self._tasks[name]
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
            logger.error(f"Error in pairs task '{name}': {error}\n{trace}")

    def _cancel_tasks(self):
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        return tasks

    def _publish(self, state):
        # Stale tasks are cancelled on reset; this keeps a late wake-up quiet too
        if state is self.state:
            self._notify()

    def _notify(self):
        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Error in pairs listener: {e}\n{traceback.format_exc()}")
