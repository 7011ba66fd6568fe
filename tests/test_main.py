"""Tests for the command-line entry point."""

import pytest

from main import main, build_parser, settings_from_args


class TestSettingsFromArgs:
    """Test translating command-line options into settings."""

    def test_defaults(self):
        settings = settings_from_args(build_parser().parse_args([]))
        assert settings.image_width == 1200
        assert settings.image_height == 800
        assert settings.samples_per_pixel == 500
        assert settings.max_depth == 50
        assert settings.vfov == 20.0
        assert settings.aperture == 0.1
        assert settings.focus_dist == 10.0

    def test_scene_preset_applied(self):
        settings = settings_from_args(build_parser().parse_args(['--scene', 'two']))
        assert settings.vfov == 90.0
        assert settings.aperture == 0.0
        assert settings.look_at == (0.0, 0.0, -1.0)

    def test_flags_override_preset(self):
        args = build_parser().parse_args(['--scene', 'two', '--vfov', '45', '--aperture', '0.5'])
        settings = settings_from_args(args)
        assert settings.vfov == 45.0
        assert settings.aperture == 0.5


class TestMain:
    """Test end-to-end runs of the renderer."""

    def test_ppm_to_stdout(self, capsys):
        status = main(['--scene', 'two', '--width', '6', '--samples', '1',
                       '--depth', '2', '--seed', '3', '--quiet'])
        captured = capsys.readouterr()

        assert status == 0
        lines = captured.out.splitlines()
        assert lines[:3] == ["P3", "6 4", "255"]
        assert len(lines) == 3 + 6 * 4
        assert captured.err == ""

    def test_same_seed_same_image(self, capsys):
        argv = ['--scene', 'three', '--width', '6', '--samples', '2',
                '--depth', '3', '--seed', '11', '--threads', '2', '--quiet']
        main(argv)
        first = capsys.readouterr().out
        main(argv)
        second = capsys.readouterr().out
        assert first == second

    def test_progress_goes_to_stderr(self, capsys):
        main(['--scene', 'two', '--width', '3', '--samples', '1', '--depth', '1', '--seed', '0'])
        captured = capsys.readouterr()

        assert captured.out.startswith("P3\n")
        assert "Scanlines remaining: 0" in captured.err
        assert "Done." in captured.err
        assert "Scanlines" not in captured.out

    def test_png_output(self, tmp_path, capsys):
        from PIL import Image

        path = tmp_path / "render.png"
        status = main(['--scene', 'two', '--width', '6', '--samples', '1',
                       '--depth', '2', '--seed', '3', '--quiet', '--output', str(path)])

        assert status == 0
        assert capsys.readouterr().out == ""
        with Image.open(path) as image:
            assert image.size == (6, 4)

    @pytest.mark.parametrize("argv", [
        ['--width', '0'],
        ['--samples', '0'],
        ['--depth', '-1'],
        ['--scene', 'two', '--focus-dist', '0'],
    ])
    def test_invalid_configuration(self, argv, capsys):
        assert main(argv) == 2
        assert "error:" in capsys.readouterr().err

    def test_output_directory_created(self, tmp_path, capsys):
        path = tmp_path / "renders" / "nested" / "out.ppm"
        status = main(['--scene', 'two', '--width', '6', '--samples', '1',
                       '--depth', '2', '--seed', '3', '--quiet', '--output', str(path)])

        assert status == 0
        lines = path.read_text().splitlines()
        assert lines[:3] == ["P3", "6 4", "255"]
        assert len(lines) == 3 + 6 * 4

    def test_unknown_extension_rejected_before_render(self, tmp_path, capsys, monkeypatch):
        import main as entry

        def fail_render(*args, **kwargs):
            raise AssertionError("render should not start")

        monkeypatch.setattr(entry.Renderer, 'render_rows', fail_render)
        path = tmp_path / "out" / "image.notaformat"
        status = main(['--scene', 'two', '--width', '6', '--samples', '1',
                       '--quiet', '--output', str(path)])
        captured = capsys.readouterr()

        assert status == 2
        assert "error:" in captured.err
        assert ".notaformat" in captured.err
        assert captured.out == ""
        assert not path.parent.exists()
