"""Tests for the analysis request and the CLI wrapper."""

import io
import json
import unittest
from contextlib import redirect_stderr, redirect_stdout
from datetime import datetime
from unittest.mock import patch

from saju import astro_calendar
from saju.analysis import analyze, analyze_birth, standard_offset_for
from saju.bazi import FourPillars
from saju.luck import Gender
from saju.run import main

SAMPLE = FourPillars.from_strings("庚午", "辛巳", "庚辰", "壬午")


class TestAnalyze(unittest.TestCase):
    def setUp(self):
        self.result = analyze(SAMPLE, 1990, 5, 15, "male")

    def test_table_sizes(self):
        self.assertEqual(len(self.result.decades.entries), 13)
        self.assertEqual(len(self.result.years), 110)
        self.assertEqual(len(self.result.months), 720)

    def test_gender_parsed(self):
        self.assertIs(self.result.gender, Gender.MALE)

    def test_document_keys(self):
        doc = self.result.to_dict()
        for key in ("dayMaster", "yearPillar", "monthPillar", "dayPillar", "hourPillar",
                    "elementCounts", "daeunStartAge", "daeun", "saeun", "wolun"):
            self.assertIn(key, doc)
        self.assertEqual(doc["daeunStartAge"], 5.3)
        self.assertEqual(doc["elementCounts"]["Fire"], 3)

    def test_document_is_json_serialisable(self):
        json.dumps(self.result.to_dict(), ensure_ascii=False)

    def test_rejects_bad_month(self):
        with self.assertRaises(ValueError):
            analyze(SAMPLE, 1990, 13, 1, "male")

    def test_rejects_bad_day(self):
        with self.assertRaises(ValueError):
            analyze(SAMPLE, 1990, 5, 0, "male")

    def test_rejects_bad_gender(self):
        with self.assertRaises(ValueError):
            analyze(SAMPLE, 1990, 5, 15, "other")


class TestAnalyzeBirth(unittest.TestCase):
    def test_default_korea_offset(self):
        with patch.object(astro_calendar, "sun_longitude", return_value=54.0):
            result = analyze_birth("1990-05-15", "11:30", "female")
        self.assertEqual(str(result.pillars), "庚午 辛巳 庚辰 壬午")
        self.assertEqual(result.birth_month, 5)
        self.assertFalse(result.decades.forward)

    def test_seoul_standard_offset(self):
        offset, dst, tz_name = standard_offset_for(datetime(1990, 5, 15, 11, 30), 37.5665, 126.978)
        self.assertEqual(tz_name, "Asia/Seoul")
        self.assertEqual(offset, 9.0)
        self.assertEqual(dst, 0.0)

    def test_korean_dst_summer(self):
        offset, dst, _ = standard_offset_for(datetime(1988, 7, 1, 12, 0), 37.5665, 126.978)
        self.assertEqual(offset, 9.0)
        self.assertEqual(dst, 1.0)


class TestCli(unittest.TestCase):
    def _run(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_daeun_section(self):
        code, out, _ = self._run(["--birth-date", "1990-05-15", "--gender", "male",
                                  "--pillars", "庚午,辛巳,庚辰,壬午", "--section", "daeun"])
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual(data["daeunStartAge"], 5.3)
        self.assertEqual(len(data["daeun"]), 13)

    def test_space_separated_pillars(self):
        code, out, _ = self._run(["--birth-date", "1990-05-15", "--gender", "female",
                                  "--pillars", "庚午 辛巳 庚辰 壬午", "--section", "pillars"])
        self.assertEqual(code, 0)
        self.assertIn("dayMaster", json.loads(out))

    def test_prompt_section_is_plain_text(self):
        code, out, _ = self._run(["--birth-date", "1990-05-15", "--gender", "male",
                                  "--pillars", "庚午,辛巳,庚辰,壬午", "--section", "prompt"])
        self.assertEqual(code, 0)
        self.assertTrue(out.startswith("[확정된 사주 원국]"))

    def test_invalid_pillar_exits_2(self):
        code, out, err = self._run(["--birth-date", "1990-05-15", "--gender", "male",
                                    "--pillars", "甲丑,辛巳,庚辰,壬午"])
        self.assertEqual(code, 2)
        self.assertEqual(out, "")
        self.assertTrue(err.startswith("error:"))

    def test_wrong_pillar_count_exits_2(self):
        code, _, _ = self._run(["--birth-date", "1990-05-15", "--gender", "male",
                                "--pillars", "庚午,辛巳,庚辰"])
        self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main()
