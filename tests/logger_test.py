from utils.logger import RunLogger


class TestRunLogger:

    def test_levels_are_tagged(self):
        logger = RunLogger("login flow", console=False)
        logger.info("打开登录页")
        logger.success("登录成功")
        logger.warning("图片损坏")
        logger.error("点击失败", ValueError("boom"))
        logger.debug("调试信息")

        assert len(logger.get_logs()) == 5
        assert logger.get_logs_by_level("success")[0].endswith("登录成功")
        assert logger.get_logs_by_level("ERROR")[0].endswith("点击失败 - boom")
        assert len(logger.get_logs_by_level("INFO")) == 1
        assert logger.test_name == "login_flow"

    def test_file_output_and_close(self, tmp_path):
        logger = RunLogger("checkout", tmp_path / "logs", console=False)
        logger.info("填写收货人信息")
        logger.close()
        assert logger.log_file.parent == tmp_path / "logs"
        assert "填写收货人信息" in logger.log_file.read_text(encoding="utf-8")
        # close 之后内存日志还在
        assert logger.get_logs()

    def test_save_and_clear(self, tmp_path):
        logger = RunLogger("cart", console=False)
        logger.info("a")
        logger.info("b")
        path = logger.save_to_file(tmp_path / "nested" / "cart.log")
        assert path.read_text(encoding="utf-8").count("[INFO]") == 2
        logger.clear_logs()
        assert logger.get_logs() == []

    def test_loggers_are_isolated(self):
        first = RunLogger("same_name", console=False)
        second = RunLogger("same_name", console=False)
        first.info("only in first")
        assert second.get_logs() == []
