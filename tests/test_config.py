import json
import pathlib

import pytest

import image_grid_plotter as igp
import image_grid_plotter.config


LabelAlignment = igp.config.LabelAlignment
PlotConfigError = igp.config.PlotConfigError


#============================================
def write_json(path: pathlib.Path, payload) -> pathlib.Path:
	"""
	Write a JSON payload to disk.
	"""
	path.write_text(json.dumps(payload), encoding="utf-8")
	return path


#============================================
def test_defaults() -> None:
	"""
	A bare config uses the documented defaults.
	"""
	config = igp.config.PlotConfig(images=[pathlib.Path("a.png")])
	assert config.rows == 1
	assert config.top_padding == 40
	assert config.left_padding == 40
	assert config.resolved_font_size() == 40.0
	assert config.column_label_alignment is LabelAlignment.CENTER
	assert not config.debug_mode
	assert not config.has_labels()


#============================================
def test_parse_alignment() -> None:
	"""
	Unknown values fall back to center.
	"""
	assert igp.config.parse_alignment("start") is LabelAlignment.START
	assert igp.config.parse_alignment(" END ") is LabelAlignment.END
	assert igp.config.parse_alignment("center") is LabelAlignment.CENTER
	assert igp.config.parse_alignment("sideways") is LabelAlignment.CENTER
	assert igp.config.parse_alignment(None) is LabelAlignment.CENTER
	assert igp.config.parse_alignment(LabelAlignment.END) is LabelAlignment.END


#============================================
def test_debug_output_path() -> None:
	"""
	The debug file sits beside the output with a _debug suffix on the stem.
	"""
	assert igp.config.build_debug_output_path(pathlib.Path("out/plot.png")) == pathlib.Path("out/plot_debug.png")
	assert igp.config.build_debug_output_path(pathlib.Path("grid.v2.jpg")) == pathlib.Path("grid.v2_debug.jpg")


#============================================
def test_load_plot_config(tmp_path: pathlib.Path) -> None:
	"""
	All JSON fields map onto the config.
	"""
	path = write_json(
		tmp_path / "plot.json",
		{
			"images": ["a.png", "b.png"],
			"output": "grid.png",
			"rows": 2,
			"row_labels": ["one", "two"],
			"column_labels": ["c"],
			"column_label_alignment": "start",
			"row_label_alignment": "end",
			"debug_mode": True,
			"top_padding": 12,
			"left_padding": 34,
			"font_size": 18,
			"font_path": "fonts/Main.ttf",
		},
	)
	config = igp.config.load_plot_config(path)
	assert config.images == [pathlib.Path("a.png"), pathlib.Path("b.png")]
	assert config.output == pathlib.Path("grid.png")
	assert config.rows == 2
	assert config.row_labels == ["one", "two"]
	assert config.column_label_alignment is LabelAlignment.START
	assert config.row_label_alignment is LabelAlignment.END
	assert config.debug_mode
	assert (config.top_padding, config.left_padding) == (12, 34)
	assert config.resolved_font_size() == 18.0
	assert config.font_path == pathlib.Path("fonts/Main.ttf")
	assert config.emoji_font_path is None


#============================================
def test_negative_padding_is_clamped(tmp_path: pathlib.Path, capsys) -> None:
	"""
	Negative padding warns and becomes zero.
	"""
	path = write_json(
		tmp_path / "plot.json",
		{"images": ["a.png"], "output": "o.png", "top_padding": -5},
	)
	config = igp.config.load_plot_config(path)
	assert config.top_padding == 0
	assert config.left_padding == 40
	assert "negative top_padding value (-5)" in capsys.readouterr().out


#============================================
@pytest.mark.parametrize(
	"content",
	[
		"{not json",
		"[1, 2, 3]",
		json.dumps({"images": ["a.png"]}),
		json.dumps({"output": "o.png"}),
	],
)
def test_bad_config_files(tmp_path: pathlib.Path, content: str) -> None:
	"""
	Malformed or incomplete files raise PlotConfigError.
	"""
	path = tmp_path / "plot.json"
	path.write_text(content, encoding="utf-8")
	with pytest.raises(PlotConfigError):
		igp.config.load_plot_config(path)


#============================================
def test_missing_config_file(tmp_path: pathlib.Path) -> None:
	"""
	A missing file raises PlotConfigError.
	"""
	with pytest.raises(PlotConfigError, match="Failed to read"):
		igp.config.load_plot_config(tmp_path / "absent.json")
