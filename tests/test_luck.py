"""Tests for Daeun / Saeun / Wolun projection."""

import unittest

from saju.luck import (
    Gender, current_decade, decade_cycle, is_forward, month_cycle,
    month_pillars_for, start_age, year_cycle,
)


def _names(entries):
    return [e.stem.chinese + e.branch.chinese for e in entries]


class TestDirection(unittest.TestCase):
    def test_yang_year_male_forward(self):
        self.assertTrue(is_forward("甲", "male"))

    def test_yang_year_female_backward(self):
        self.assertFalse(is_forward("甲", "female"))

    def test_yin_year_male_backward(self):
        self.assertFalse(is_forward("乙", "male"))

    def test_yin_year_female_forward(self):
        self.assertTrue(is_forward("乙", Gender.FEMALE))

    def test_gender_parse(self):
        self.assertEqual(Gender.parse("M"), Gender.MALE)
        self.assertEqual(Gender.parse("여"), Gender.FEMALE)
        with self.assertRaises(ValueError):
            Gender.parse("other")


class TestStartAge(unittest.TestCase):
    def test_mid_month(self):
        # 31 / 2 - 15 + 15 = 15.5 → 16 days → 5.3 years
        self.assertEqual(start_age(5, 15), 5.3)

    def test_half_rounds_up(self):
        # 31 / 2 - 2 + 15 = 28.5 → 29 days → 9.7 years
        self.assertEqual(start_age(1, 2), 9.7)
        self.assertEqual(start_age(1, 1), 10.0)

    def test_negative_distance_is_absolute(self):
        # 30 / 2 - 31 + 15 = -1 → 1 day → 0.3 years
        self.assertEqual(start_age(6, 31), 0.3)
        self.assertEqual(start_age(1, 31), 0.0)

    def test_february_has_28_days(self):
        # 28 / 2 - 1 + 15 = 28 → 9.3
        self.assertEqual(start_age(2, 1), 9.3)

    def test_month_out_of_range(self):
        with self.assertRaises(ValueError):
            start_age(13, 1)
        with self.assertRaises(ValueError):
            start_age(0, 1)


class TestDecadeCycle(unittest.TestCase):
    def setUp(self):
        self.male = decade_cycle(1990, 5, 15, "male", "辛", "巳", "庚")

    def test_thirteen_entries(self):
        self.assertEqual(len(self.male.entries), 13)
        self.assertTrue(self.male.forward)
        self.assertEqual(self.male.start_age, 5.3)

    def test_forward_pillars(self):
        self.assertEqual(_names(self.male.entries[:3]), ["壬午", "癸未", "甲申"])

    def test_backward_pillars(self):
        female = decade_cycle(1990, 5, 15, "female", "辛", "巳", "庚")
        self.assertFalse(female.forward)
        self.assertEqual(_names(female.entries[:3]), ["庚辰", "己卯", "戊寅"])

    def test_ages_and_years(self):
        first, second, third = self.male.entries[:3]
        self.assertEqual((first.start_age, first.end_age, first.start_year), (5.3, 14, 1995))
        self.assertEqual((second.start_age, second.end_age, second.start_year), (15, 24, 2005))
        self.assertEqual((third.start_age, third.end_age, third.start_year), (25, 34, 2015))
        last = self.male.entries[-1]
        self.assertEqual((last.start_age, last.end_age), (125, 134))

    def test_end_age_is_one_less_than_next_start(self):
        for current, following in zip(self.male.entries, self.male.entries[1:]):
            self.assertEqual(current.end_age, following.start_age - 1)

    def test_backward_walk_wraps_below_zero(self):
        # 乙丑 is position 1; backward from it goes 甲子, 癸亥, ...
        cycle = decade_cycle(1985, 3, 10, "male", "乙", "丑", "乙")
        self.assertEqual(_names(cycle.entries[:3]), ["甲子", "癸亥", "壬戌"])

    def test_to_dict(self):
        d = self.male.to_dict()
        self.assertEqual(d["daeunStartAge"], 5.3)
        self.assertEqual(d["direction"], "forward")
        self.assertEqual(d["daeun"][0]["stemKorean"], "임")
        self.assertEqual(d["daeun"][0]["branchKorean"], "오")

    def test_current_decade(self):
        self.assertIsNone(current_decade(self.male, 5))
        self.assertEqual(current_decade(self.male, 10), self.male.entries[0])
        self.assertEqual(current_decade(self.male, 14.5), self.male.entries[0])
        self.assertEqual(current_decade(self.male, 15), self.male.entries[1])
        self.assertIsNone(current_decade(self.male, 200))


class TestYearCycle(unittest.TestCase):
    def test_span_and_ages(self):
        entries = year_cycle(1990)
        self.assertEqual(len(entries), 110)
        self.assertEqual((entries[0].year, entries[0].age), (1990, 1))
        self.assertEqual((entries[-1].year, entries[-1].age), (2099, 110))

    def test_pillars(self):
        entries = year_cycle(1984)
        self.assertEqual(_names(entries[:2]), ["甲子", "乙丑"])
        by_year = {e.year: e for e in year_cycle(1990)}
        self.assertEqual(_names([by_year[1990], by_year[2026]]), ["庚午", "丙午"])

    def test_years_before_anchor(self):
        self.assertEqual(_names(year_cycle(1983)[:1]), ["癸亥"])


class TestMonthCycle(unittest.TestCase):
    def test_720_entries_in_order(self):
        entries = month_cycle(1990)
        self.assertEqual(len(entries), 720)
        expected = [(y, m) for y in range(1990, 2050) for m in range(1, 13)]
        self.assertEqual([(e.year, e.month) for e in entries], expected)

    def test_five_tigers(self):
        self.assertEqual(_names(month_pillars_for(1984)[:1]), ["丙寅"])   # 甲 year
        self.assertEqual(_names(month_pillars_for(1990)[:1]), ["戊寅"])   # 庚 year
        self.assertEqual(_names(month_pillars_for(2026)[:1]), ["庚寅"])   # 丙 year
        self.assertEqual(_names(month_pillars_for(1988)[:1]), ["甲寅"])   # 戊 year

    def test_branches_run_tiger_to_ox(self):
        months = month_pillars_for(2026)
        self.assertEqual("".join(m.branch.chinese for m in months), "寅卯辰巳午未申酉戌亥子丑")
        self.assertEqual(_names(months[-2:]), ["庚子", "辛丑"])


if __name__ == "__main__":
    unittest.main()
