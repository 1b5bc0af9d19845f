"""Tests for confrontation.py — exact payoffs, payoff matrix, fitness."""

from collections import Counter

import numpy as np
import pytest
from evolutionary_poker import confrontation
from evolutionary_poker.confrontation import (
    confront,
    fitness_a,
    fitness_b,
    payoff_matrix,
    win_table,
)
from evolutionary_poker.domain import (
    random_population_a,
    random_population_b,
    repair_population_b,
)


class TestWinTable:
    def test_signs(self):
        W = win_table(3)
        # rows = B's rank, cols = A's rank
        assert W.tolist() == [[0, 1, 1], [-1, 0, 1], [-1, -1, 0]]

    def test_antisymmetric_and_read_only(self):
        W = win_table(6)
        assert (W == -W.T).all()
        with pytest.raises(ValueError):
            W[0, 0] = 1

    def test_cached(self):
        assert win_table(7) is win_table(7)


class TestConfront:
    def test_regression_scenario(self, four_rank_config, scenario_b):
        a = np.array([2, 8, 4, 10])
        assert confront(a, scenario_b, 2.0, four_rank_config) == -0.75

    def test_deterministic(self, four_rank_config, scenario_b):
        a = np.array([2, 8, 4, 10])
        first = confront(a, scenario_b, 2.0, four_rank_config)
        second = confront(a, scenario_b, 2.0, four_rank_config)
        assert first == second

    def test_always_fold_pays_ante(self, four_rank_config):
        a = np.array([2, 2, 2, 2])
        b = np.zeros((4, 6), dtype=bool)
        assert confront(a, b, 2.0, four_rank_config) == 2.0

    def test_always_call_is_pure_showdown(self, four_rank_config):
        # equal bets everywhere → symmetric showdown averages to zero
        a = np.array([4, 4, 4, 4])
        b = np.ones((4, 6), dtype=bool)
        assert confront(a, b, 2.0, four_rank_config) == 0.0

    def test_zero_bet_is_showdown_for_the_ante(self, four_rank_config):
        b = repair_population_b(np.zeros((4, 6), dtype=bool), four_rank_config)
        a = np.zeros(4)
        # every deal is called and pays ante · W, which averages to zero
        assert confront(a, b, 2.0, four_rank_config) == 0.0

    def test_zero_bet_per_deal_stake_is_ante(self, four_rank_config):
        b = repair_population_b(np.zeros((4, 6), dtype=bool), four_rank_config)
        # ranks 1..3 bet 10: nine folds at +2, three calls by rank 4 at -12
        # rank 4 bets 0: always called, +ante against 1..3 and a tie
        a = np.array([10, 10, 10, 0])
        value = confront(a, b, 2.0, four_rank_config)
        assert value == (9 * 2 + 3 * -12 + 3 * 2) / 16

    def test_payoff_to_b_is_the_negation(self, config):
        rng = np.random.default_rng(3)
        pop_a = random_population_a(config, rng)
        pop_b = random_population_b(config, rng)
        ante = config.ante
        for a in pop_a:
            for b in pop_b:
                # B's own bookkeeping, deal by deal: a fold gives the ante
                # to A, a call settles ante + bet at showdown
                total_b = 0.0
                for rank_b in range(config.num_ranks):
                    for rank_a in range(config.num_ranks):
                        bet = a[rank_a]
                        col = int(bet // config.bet_step)
                        if b[rank_b, col]:
                            if rank_b > rank_a:
                                total_b += ante + bet
                            elif rank_b < rank_a:
                                total_b -= ante + bet
                        else:
                            total_b -= ante
                to_b = total_b / config.num_ranks ** 2
                assert to_b == pytest.approx(-confront(a, b, ante, config))

    def test_bound(self, config):
        rng = np.random.default_rng(5)
        pop_a = random_population_a(config, rng)
        pop_b = random_population_b(config, rng)
        limit = config.ante + config.max_bet
        m = payoff_matrix(pop_a, pop_b, config)
        assert np.all(np.abs(m) <= limit)

    def test_domain_mismatch_is_fatal(self, four_rank_config, scenario_b):
        with pytest.raises(ValueError):
            confront(np.array([2, 8, 4]), scenario_b, 2.0, four_rank_config)
        with pytest.raises(ValueError):
            confront(np.array([2, 8, 4, 11]), scenario_b, 2.0, four_rank_config)
        with pytest.raises(ValueError):
            confront(np.array([2, 8, 4, 10]), scenario_b[:, :5], 2.0,
                     four_rank_config)


class TestPayoffMatrix:
    def test_shape_and_orientation(self, four_rank_config, scenario_b):
        pop_a = np.array([[2, 8, 4, 10], [0, 0, 0, 0], [10, 10, 10, 10]])
        pop_b = np.stack([scenario_b, np.ones((4, 6), dtype=bool)])
        m = payoff_matrix(pop_a, pop_b, four_rank_config)
        assert m.shape == (2, 3)
        assert m[0, 0] == -0.75
        assert m[1, 1] == 0.0

    def test_every_pair_confronted_once(self, config, monkeypatch):
        rng = np.random.default_rng(1)
        pop_a = random_population_a(config, rng)[:4]
        pop_b = random_population_b(config, rng)[:3]
        # identify strategies by object so duplicate rows stay distinct
        rows_a, rows_b = list(pop_a), list(pop_b)
        ids_a = {id(row): j for j, row in enumerate(rows_a)}
        ids_b = {id(row): i for i, row in enumerate(rows_b)}
        seen = []
        real = confrontation.confront

        def counting(a, b, ante, cfg):
            seen.append((ids_b[id(b)], ids_a[id(a)]))
            return real(a, b, ante, cfg)

        monkeypatch.setattr(confrontation, "confront", counting)
        payoff_matrix(rows_a, rows_b, config)
        expected = [(i, j) for i in range(3) for j in range(4)]
        assert Counter(seen) == Counter(expected)


class TestFitness:
    def test_fitness_a_is_column_mean(self):
        m = np.array([[1.0, -2.0], [3.0, 4.0], [-1.0, 1.0]])
        assert fitness_a(m).tolist() == [1.0, 1.0]

    def test_fitness_b_is_negated_row_mean(self):
        m = np.array([[1.0, -3.0], [3.0, 4.0]])
        assert fitness_b(m).tolist() == [1.0, -3.5]

    def test_totals_are_zero_sum(self, config):
        rng = np.random.default_rng(9)
        m = payoff_matrix(random_population_a(config, rng),
                          random_population_b(config, rng), config)
        assert fitness_a(m).mean() == pytest.approx(-fitness_b(m).mean())
