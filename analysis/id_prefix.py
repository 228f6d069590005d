"""
Модуль сокращения идентификаторов

Подбирает минимальную длину префикса, при которой все идентификаторы
задач остаются различимыми при отображении
"""

from typing import Iterable, List

from config import Config


class IdDisambiguator:
    """Минимальная уникальная длина префикса для набора идентификаторов"""

    def __init__(self, minimum: int = None):
        self.minimum = Config.ID_MIN_LENGTH if minimum is None else minimum

    def shortest_length(self, ids: Iterable[str]) -> int:
        """
        Минимальная длина L >= minimum, при которой префиксы длины L
        всех идентификаторов попарно различны.

        Args:
            ids: Полные идентификаторы (hex-строки одинаковой длины)

        Returns:
            Длина префикса
        """
        ordered = sorted(set(ids))
        if len(ordered) < 2:
            return self.minimum

        pair_lengths = [
            self._distinguishing_length(a, b)
            for a, b in zip(ordered, ordered[1:])
        ]

        # Каждый элемент защищён большим из требований двух соседних пар
        required = self._element_requirements(pair_lengths)

        return max(max(required), self.minimum)

    @staticmethod
    def _distinguishing_length(a: str, b: str) -> int:
        """Индекс первого различающегося символа + 1"""
        for i, (x, y) in enumerate(zip(a, b)):
            if x != y:
                return i + 1
        # Один идентификатор - префикс другого
        return min(len(a), len(b)) + 1

    @staticmethod
    def _element_requirements(pair_lengths: List[int]) -> List[int]:
        required = [pair_lengths[0]]
        carried = pair_lengths[0]
        for length in pair_lengths[1:]:
            # Более короткое требование не отменяет уже найденный конфликт
            required.append(max(carried, length))
            carried = length
        required.append(pair_lengths[-1])
        return required


def shortest_id_length(ids: Iterable[str], minimum: int = None) -> int:
    """Quick function: минимальная уникальная длина префикса"""
    return IdDisambiguator(minimum).shortest_length(ids)
