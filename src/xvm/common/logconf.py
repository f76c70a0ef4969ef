import logging as lg

LOG_FORMAT = '%(filename)s:%(lineno)d %(asctime)s [%(levelname)s] - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(verbose: bool):
    lg.basicConfig(
        level=lg.DEBUG if verbose else lg.INFO,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT
    )
