import logging
import unittest

from chartcache.utils.logger import get_logger, set_level


class LoggingUtilsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.logger = logging.getLogger("chartcache")
        self.original_handlers = list(self.logger.handlers)
        self.original_level = self.logger.level
        self.child = get_logger("chartcache.cache_store")
        self.original_child_level = self.child.level
        self.original_uvicorn_level = logging.getLogger("uvicorn").level

    def tearDown(self) -> None:
        self.logger.handlers = list(self.original_handlers)
        self.logger.setLevel(self.original_level)
        self.child.setLevel(self.original_child_level)
        logging.getLogger("uvicorn").setLevel(self.original_uvicorn_level)

    def test_get_logger_reuses_existing_handlers(self) -> None:
        handler = logging.StreamHandler()
        self.logger.handlers = [handler]

        logger = get_logger("chartcache")

        self.assertIs(logger, self.logger)
        self.assertEqual(len(logger.handlers), 1)
        self.assertFalse(logger.propagate)

    def test_set_level_updates_package_loggers(self) -> None:
        set_level(logging.WARNING)

        self.assertEqual(logging.getLogger("chartcache").level, logging.WARNING)
        self.assertEqual(self.child.level, logging.WARNING)
        self.assertEqual(logging.getLogger("uvicorn").level, logging.WARNING)


if __name__ == "__main__":
    unittest.main()
