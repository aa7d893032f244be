"""
Test data generators for ordering tests.

Builds boards, lists and cards the way the kanban service stores them: each
item carries an opaque ``position`` key and siblings are read back with a
plain byte-order sort.
"""

import random

import factory
import factory.fuzzy
from faker import Faker

from fractional_indexing import generate_key_between, generate_n_keys_between

fake = Faker()


class CardFactory(factory.Factory):
    """Factory for a card record without a position."""

    class Meta:
        model = dict

    card_id = factory.Sequence(lambda n: n + 1000)
    title = factory.Faker('sentence', nb_words=4)
    description = factory.Faker('paragraph', nb_sentences=2)


class BoardListFactory(factory.Factory):
    """Factory for a list record; ``card_count`` controls how many cards it gets."""

    class Meta:
        model = dict

    list_id = factory.Sequence(lambda n: n + 100)
    name = factory.LazyFunction(lambda: fake.word().title())
    card_count = factory.fuzzy.FuzzyInteger(0, 25)


def generate_sample_cards(count=10):
    """Cards with positions appended one after another, as new cards are added."""
    cards = []
    position = None
    for _ in range(count):
        position = generate_key_between(position, None)
        card = CardFactory()
        card['position'] = position
        cards.append(card)
    return cards


def generate_sample_board(list_count=5):
    """A board whose lists were created in one batch and filled with appended cards."""
    positions = generate_n_keys_between(None, None, list_count)
    lists = []
    for position in positions:
        board_list = BoardListFactory()
        board_list['position'] = position
        board_list['cards'] = generate_sample_cards(board_list['card_count'])
        lists.append(board_list)
    return {'board_id': random.randint(1, 9999), 'name': fake.catch_phrase(), 'lists': lists}


def shuffled_moves(keys, move_count=50, seed=None):
    """
    Apply random moves to a sibling list, each one picking a new key between
    the neighbours at the destination index.

    Returns the keys in their logical order after all moves.
    """
    rng = random.Random(seed)
    order = list(keys)
    for _ in range(move_count):
        moved = order.pop(rng.randrange(len(order)))
        index = rng.randrange(len(order) + 1)
        before = order[index - 1] if index > 0 else None
        after = order[index] if index < len(order) else None
        order.insert(index, generate_key_between(before, after))
    return order


# Keys that must be rejected, with the rule each breaks
MALFORMED_KEYS = [
    ('', 'empty'),
    ('a', 'integer part shorter than its head implies'),
    ('b0', 'three-digit head with two digits'),
    ('a10', 'fractional part ends in zero'),
    ('a0V0', 'longer fraction ends in zero'),
    ('0a', 'digit is not a valid head'),
    ('a-', 'character outside the alphabet'),
    ('a0 V', 'embedded space'),
    ('A' + '0' * 26, 'reserved smallest integer'),
]

# Well-formed keys in strictly increasing order, spanning several bands
ORDERED_VALID_KEYS = [
    'A' + '0' * 26 + 'V',
    'Yzz',
    'Z0',
    'Za',
    'Zz',
    'a0',
    'a0V',
    'a1',
    'az',
    'b00',
    'b001',
    'zzzzzzzzzzzzzzzzzzzzzzzzzzz',
]
