import math


class TokenEstimator:
    CHARS_PER_TOKEN = 4

    @staticmethod
    def estimate(text: str) -> int:
        """Rough token count: one token per 4 characters, rounded up"""
        return math.ceil(len(text or "") / TokenEstimator.CHARS_PER_TOKEN)


def estimate_tokens(text: str) -> int:
    return TokenEstimator.estimate(text)
