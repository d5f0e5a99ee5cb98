"""Normalized outcome of a component's specs run."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SpecError(BaseModel):
    """Failure details for a single spec."""

    message: str = ""
    stack: str | None = None


class SpecResult(BaseModel):
    """Outcome of a single spec case."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    pass_: bool = Field(..., alias="pass")
    err: SpecError | None = None
    duration: float | None = None


class Stats(BaseModel):
    """Timing for the whole run (epoch milliseconds)."""

    start: float | None = None
    end: float | None = None
    duration: float | None = None


class SpecsResults(BaseModel):
    """Specs results derived from raw tester output."""

    model_config = ConfigDict(populate_by_name=True)

    tests: list[SpecResult] = Field(default_factory=list)
    stats: Stats = Field(default_factory=Stats)
    pass_: bool = Field(..., alias="pass")
    failures: list[SpecError] = Field(default_factory=list)

    @classmethod
    def create_from_raw(cls, raw: dict[str, Any]) -> "SpecsResults":
        """Normalize raw runner output.

        The run passes only when every test passed and the tester reported
        no failures outside of tests (e.g. hook errors).
        """
        raw = raw or {}

        tests = []
        for raw_test in raw.get("tests") or []:
            err = raw_test.get("err")
            if isinstance(err, str):
                err = {"message": err}
            tests.append(
                SpecResult(
                    title=raw_test.get("title", ""),
                    pass_=bool(raw_test.get("pass", False)),
                    err=SpecError.model_validate(err) if err else None,
                    duration=raw_test.get("duration"),
                )
            )

        failures = []
        for failure in raw.get("failures") or []:
            if failure is None:
                continue
            if isinstance(failure, dict) and "err" in failure:
                failure = failure["err"] or {}
            if not isinstance(failure, dict):
                failure = {"message": str(failure)}
            failures.append(SpecError.model_validate(failure))

        raw_stats = raw.get("stats") or {}
        start = raw_stats.get("start")
        end = raw_stats.get("end")
        duration = raw_stats.get("duration")
        if duration is None and start is not None and end is not None:
            duration = end - start

        passed = all(test.pass_ for test in tests) and not failures
        return cls(
            tests=tests,
            stats=Stats(start=start, end=end, duration=duration),
            pass_=passed,
            failures=failures,
        )

    def serialize(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def deserialize(cls, record: dict[str, Any]) -> "SpecsResults":
        return cls.model_validate(record)
