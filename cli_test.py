import run_morph as cli



def test_load_config_defaults(tmp_path):
    config = cli.load_config(str(tmp_path / "missing.yaml"))

    assert config == cli.DEFAULT_CONFIG
    assert cli.load_config(None) == cli.DEFAULT_CONFIG


def test_load_config_overrides(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("ratio: 0.25\noutput_width: 200\n")

    config = cli.load_config(str(path))

    assert config["ratio"] == 0.25
    assert config["output_width"] == 200
    assert config["output_height"] == 400


def test_parse_args():
    args = cli.parse_args(["a.jpg", "b.jpg", "-r", "0.7", "-n", "5", "--debug"])

    assert args.image1 == "a.jpg"
    assert args.image2 == "b.jpg"
    assert args.ratio == 0.7
    assert args.num_frames == 5
    assert args.debug
    assert args.output is None


def test_missing_image_exits_with_error(tmp_path):
    status = cli.main([
        str(tmp_path / "a.jpg"),
        str(tmp_path / "b.jpg"),
        "-c", str(tmp_path / "missing.yaml")])

    assert status == 1
