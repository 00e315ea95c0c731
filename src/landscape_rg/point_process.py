from typing import Generator, Generic, Iterator, TypeVar, Union

import numpy as np

T = TypeVar('T', bound=tuple[int, ...])


class IntensityFunction:

    @property
    def rate(self) -> float:
        raise NotImplementedError

    def is_accepted(self, value: tuple[int, ...], threshold: float) -> bool:
        raise NotImplementedError


class PointProcess(Generic[T]):

    def __init__(self, rate: Union[int, float, IntensityFunction],
                 size: T, seed: Union[int, np.random.Generator]) -> None:
        if (not isinstance(size, tuple) or
                any(not isinstance(dim, int) for dim in size)):
            raise TypeError("Argument 'size' should be a tuple of integer numbers, not '%s'" %
                            type(size).__name__)
        if any(dim <= 0 for dim in size):
            raise ValueError("Argument 'size' should be positive")

        if not isinstance(rate, (int, float, IntensityFunction)):
            raise TypeError("Argument 'rate' should be a number or %s, not '%s'" %
                            (IntensityFunction.__name__, type(rate).__name__))
        if ((isinstance(rate, (int, float)) and rate < 0) or
                (isinstance(rate, IntensityFunction) and rate.rate < 0)):
            raise ValueError("Argument 'rate' should not be negative")

        if isinstance(seed, np.random.Generator):
            self._rng = seed
        elif isinstance(seed, int):
            self._rng = np.random.default_rng(seed)
        else:
            raise TypeError("Argument 'seed' should be integer number or Generator, not '%s'" %
                            type(seed).__name__)

        self.rate = rate
        self.size = size

        self._next = self._generator()

    def __next__(self) -> T:
        return next(self._next)

    def __iter__(self) -> Iterator[T]:
        return self

    def _generator(self) -> Generator[T, None, None]:
        raise NotImplementedError

    @property
    def expected(self) -> int:
        return round(self.rate.rate if isinstance(self.rate, IntensityFunction) else self.rate)


class RejectionSampler(PointProcess):
    """Draws uniform candidates until the expected count of distinct points is accepted.

    The number of candidates drawn is bounded by `max_attempts`, so iteration always terminates;
    check :attr:`attempts` and the number of points yielded to detect partial results.
    """

    def __init__(self, rate: Union[int, float, IntensityFunction], size: T,
                 seed: Union[int, np.random.Generator], *, max_attempts: int) -> None:
        if not isinstance(max_attempts, int):
            raise TypeError("Argument 'max_attempts' should be integer number, not '%s'" %
                            type(max_attempts).__name__)
        if max_attempts < 0:
            raise ValueError("Argument 'max_attempts' should not be negative")
        self.max_attempts = max_attempts
        self.attempts = 0
        super().__init__(rate, size, seed)

    def _generator(self) -> Generator[T, None, None]:
        n = self.expected
        accepted = set()
        while len(accepted) < n and self.attempts < self.max_attempts:
            self.attempts += 1
            candidate = tuple(int(i) for i in self._rng.integers([0] * len(self.size),
                                                                  self.size))
            if candidate in accepted:
                continue
            if isinstance(self.rate, IntensityFunction):
                # non-homogeneous
                d = self._rng.uniform(0, 1)
                if not self.rate.is_accepted(candidate, d):
                    continue
            accepted.add(candidate)
            yield candidate
