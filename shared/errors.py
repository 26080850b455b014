class AdbError(Exception):
    pass


class SimctlError(Exception):
    pass
