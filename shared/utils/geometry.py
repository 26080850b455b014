def clamp(value, low, high):
    return max(low, min(high, value))


def bounds_center(bounds):
    left, top, right, bottom = bounds
    return (left + right) // 2, (top + bottom) // 2
