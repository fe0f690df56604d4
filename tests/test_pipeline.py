"""
End-to-end tests for build_palette.

Covers the pipeline guarantees: idempotence, permutation closure, multiset
preservation, cluster-count boundaries and typed errors.
"""

import random
from collections import Counter

import pytest

from palette_service.services.palette import (
    ColorSpace, InvalidClusterCount, InvalidInput, SortOrder, build_palette
)
from palette_service.services.palette.conversion import convert_hexcodes
from palette_service.services.palette.sorting import sort_cluster

MIXED = [
    "#1F4E79", "#D3B58F", "#2D7560", "#0A2A43", "#FF0000", "#FF0001", "#00FF00",
    "#0000FF", "#FFFFFF", "#000000", "#808080", "#FFA500", "#800080", "#ffc0cb",
]


class TestPipelineGuarantees:
    """Test properties that hold for every valid input"""

    @pytest.mark.parametrize("space", ["lch", "hsl"])
    def test_idempotent(self, space):
        first = build_palette(MIXED, 4, space)
        second = build_palette(MIXED, 4, space)
        assert first.colors == second.colors
        assert first.labels == second.labels
        assert first.weights == second.weights

    @pytest.mark.parametrize("space", ["lch", "hsl"])
    def test_permutation_closure(self, space):
        reference = build_palette(MIXED, 5, space)
        rng = random.Random(1234)
        for _ in range(5):
            shuffled = MIXED[:]
            rng.shuffle(shuffled)
            assert build_palette(shuffled, 5, space).colors == reference.colors

    @pytest.mark.parametrize("k", [1, 3, 7, 14])
    def test_length_and_multiset_preserved(self, k):
        result = build_palette(MIXED, k)
        assert len(result.colors) == len(MIXED)
        assert Counter(result.colors) == Counter(MIXED)
        assert result.weights == (1,) * len(MIXED)
        assert sum(result.cluster_sizes) == len(MIXED)
        assert len(result.cluster_sizes) == k

    def test_duplicates_preserved(self):
        colors = ["#AA0000", "#aa0000", "#AA0000", "#0000AA"]
        result = build_palette(colors, 2)
        assert Counter(result.colors) == Counter(colors)

    def test_labels_grouped_ascending(self):
        result = build_palette(MIXED, 6)
        assert list(result.labels) == sorted(result.labels)

    def test_different_seed_still_valid(self):
        result = build_palette(MIXED, 4, seed=7)
        assert result.seed == 7
        assert Counter(result.colors) == Counter(MIXED)


class TestClusterCountBoundaries:
    """Test k = 1, k = n and out-of-range counts"""

    @pytest.mark.parametrize("space", [ColorSpace.LCH, ColorSpace.HSL])
    def test_single_cluster_is_pure_perceptual_sort(self, space, rainbow_hexcodes):
        result = build_palette(rainbow_hexcodes, 1, space)
        expected = sort_cluster(rainbow_hexcodes, convert_hexcodes(rainbow_hexcodes, space))
        assert list(result.colors) == expected
        assert set(result.labels) == {0}

    def test_single_color(self):
        result = build_palette(["#123456"], 1)
        assert result.colors == ("#123456",)
        assert result.weights == (1,)
        assert result.labels == (0,)

    def test_one_cluster_per_color(self, rainbow_hexcodes):
        result = build_palette(rainbow_hexcodes, len(rainbow_hexcodes))
        assert result.cluster_sizes == (1,) * len(rainbow_hexcodes)

    def test_twenty_one_clusters_rejected(self):
        colors = [f"#{i:02X}{(i * 7) % 256:02X}{(i * 13) % 256:02X}" for i in range(25)]
        with pytest.raises(InvalidClusterCount):
            build_palette(colors, 21)

    def test_zero_clusters_rejected(self):
        with pytest.raises(InvalidClusterCount):
            build_palette(["#FF0000"], 0)

    def test_more_clusters_than_colors_rejected(self):
        with pytest.raises(InvalidClusterCount):
            build_palette(["#FF0000", "#00FF00"], 3)


class TestExampleScenario:
    """Four colors with two near-identical reds, k = 2"""

    COLORS = ["#FF0000", "#00FF00", "#0000FF", "#FF0001"]

    def test_lch_groups_reds_together(self):
        result = build_palette(self.COLORS, 2, ColorSpace.LCH)
        red = result.colors.index("#FF0000")
        red2 = result.colors.index("#FF0001")
        assert abs(red - red2) == 1
        assert result.labels[red] == result.labels[red2]

    def test_hsl_partition_for_seed_42(self):
        """Only hue varies in HSL, and #FF0001 sits at the top of the linear hue axis"""
        first = build_palette(self.COLORS, 2, ColorSpace.HSL)
        second = build_palette(list(reversed(self.COLORS)), 2, ColorSpace.HSL)
        assert first.colors == ("#FF0000", "#00FF00", "#0000FF", "#FF0001")
        assert first.labels == (0, 0, 1, 1)
        assert first.cluster_sizes == (2, 2)
        assert second.colors == first.colors

    def test_hsl_members_sorted_by_hue(self):
        result = build_palette(self.COLORS, 2, ColorSpace.HSL)
        coords = dict(zip(self.COLORS, convert_hexcodes(self.COLORS, ColorSpace.HSL)))
        for label in set(result.labels):
            hues = [coords[c].hue for c, lab in zip(result.colors, result.labels) if lab == label]
            assert hues == sorted(hues)


class TestErrors:
    """Test typed error reporting"""

    def test_all_invalid_values_listed(self):
        with pytest.raises(InvalidInput) as exc:
            build_palette(["#FF0000", "red", "#12", "#00FF00"], 1)
        assert exc.value.invalid_values == ["red", "#12"]
        assert exc.value.to_dict()["kind"] == "InvalidInput"

    def test_invalid_values_caught_without_up_front_validation(self):
        with pytest.raises(InvalidInput) as exc:
            build_palette(["#FF0000", "#XYZXYZ"], 1, validate=False)
        assert exc.value.invalid_values == ["#XYZXYZ"]

    def test_non_string_entries_without_up_front_validation(self):
        with pytest.raises(InvalidInput) as exc:
            build_palette(["#FF0000", None, 12], 1, validate=False)
        assert exc.value.invalid_values == [None, 12]

    def test_empty_input(self):
        with pytest.raises(InvalidInput):
            build_palette([], 1)

    def test_unknown_color_space(self):
        with pytest.raises(InvalidInput):
            build_palette(["#FF0000"], 1, "cmyk")

    def test_sort_order_option(self, rainbow_hexcodes):
        result = build_palette(rainbow_hexcodes, 1, sort_order=SortOrder.LIGHTNESS_FIRST)
        coords = dict(zip(rainbow_hexcodes, convert_hexcodes(rainbow_hexcodes)))
        lightness = [coords[c].lightness for c in result.colors]
        assert lightness == sorted(lightness)
        assert result.sort_order == SortOrder.LIGHTNESS_FIRST
