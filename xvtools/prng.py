"""Park-Miller minimal standard pseudo-random generator."""

_MASK64 = 0xFFFFFFFFFFFFFFFF


def do_rand(ctx):
    """Advance the generator state ``ctx``; the result is also the new state."""
    x = ((ctx & _MASK64) % 0x7FFFFFFE) + 1
    hi, lo = divmod(x, 127773)
    x = 16807 * lo - 2836 * hi
    if x < 0:
        x += 0x7FFFFFFF
    return x - 1


class ParkMiller:
    """Stateful generator yielding values in [0, 0x7ffffffd]."""

    def __init__(self, seed=1):
        self.state = seed & _MASK64

    def next(self):
        self.state = do_rand(self.state)
        return self.state

    def __iter__(self):
        while True:
            yield self.next()