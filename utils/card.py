"""
Defines the Card class for the Pairs game.
"""
from common.config import FLOWER_EMOJIS, CARD_BACK

class Card:
    """Represents a single card in a pairs deck.

    A card never changes in place once it is in a deck; the engine swaps in
    an updated copy instead, so a list of cards handed to an observer stays
    a consistent snapshot.
    """
    __slots__ = ("id", "symbol_id", "is_flipped", "is_selected", "is_wrong_guess")

    def __init__(self, id, symbol_id, is_flipped=False, is_selected=False, is_wrong_guess=False):
        self.id = id  # Position in the deck, stable for the game's lifetime
        self.symbol_id = symbol_id  # Index into FLOWER_EMOJIS, shared by exactly two cards
        self.is_flipped = is_flipped
        self.is_selected = is_selected  # Waiting for its partner
        self.is_wrong_guess = is_wrong_guess  # Part of a mismatch being shown

    def copy(self, **changes):
        """Returns a new card with the given fields replaced."""
        fields = {name: getattr(self, name) for name in self.__slots__}
        for name in changes:
            if name not in fields:
                raise TypeError(f"Card has no field '{name}'")
        fields.update(changes)
        return Card(**fields)

    def get_display(self, force_reveal=False):
        """Returns the emoji to display based on state."""
        if self.is_flipped or force_reveal:
            return FLOWER_EMOJIS[self.symbol_id]
        return CARD_BACK

    def matches(self, other_card):
        """Checks if this card and another, different card form a pair."""
        if not isinstance(other_card, Card):
            return False
        if self.id == other_card.id:  # Cannot match itself
            return False
        return self.symbol_id == other_card.symbol_id

    def __repr__(self):
        """Developer representation."""
        return (f"Card(id={self.id}, symbol_id={self.symbol_id}, is_flipped={self.is_flipped}, "
                f"is_selected={self.is_selected}, is_wrong_guess={self.is_wrong_guess})")

    def __eq__(self, other):
        """Two cards are equal if every field is equal."""
        if not isinstance(other, Card):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    def __hash__(self):
        """Allows cards to be used in sets/dictionaries."""
        return hash(tuple(getattr(self, name) for name in self.__slots__))
