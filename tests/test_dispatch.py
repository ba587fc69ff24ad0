"""
Test the command dispatch table and every verb's invocation
"""

import json
from pathlib import Path

import pytest

from vidpro import (
    COMMANDS, MissingToolError, ProcessFailedError, UnknownCommandError, UsageError,
)
from conftest import invocations, stderr_text, stdout_text

MIN_ARGS = {
    'cut': 4,
    'cut-precise': 4,
    'subs': 3,
    'clean-srt': 2,
    'face-crop': 2,
    'thumbnail': 6,
    'batch-cut': 3,
    'info': 1,
    'concat': 3,
    'resize': 4,
    'extract-audio': 2,
    'help': 0,
}


class TestDispatchTable:
    """Argument-count validation and verb lookup"""

    def test_all_verbs_registered(self):
        assert {name: spec.min_args for name, spec in COMMANDS.items()} == MIN_ARGS

    @pytest.mark.parametrize("verb,min_args", [(v, n) for v, n in MIN_ARGS.items() if n > 0])
    def test_too_few_arguments(self, dispatcher, runner, verb, min_args):
        """Usage error and no external process for every verb"""
        with pytest.raises(UsageError) as exc_info:
            dispatcher.dispatch(verb, ['x'] * (min_args - 1))

        assert exc_info.value.usage.startswith(f'vidpro {verb}')
        assert exc_info.value.exit_code == 1
        runner.run.assert_not_called()

    def test_unknown_verb(self, dispatcher, runner):
        with pytest.raises(UnknownCommandError) as exc_info:
            dispatcher.dispatch('explode', ['a'])

        assert exc_info.value.exit_code == 1
        assert 'explode' in str(exc_info.value)
        runner.run.assert_not_called()

    @pytest.mark.parametrize("verb", ['help', '--help', '-h'])
    def test_help(self, dispatcher, runner, output, verb):
        assert dispatcher.dispatch(verb, []) == 0

        text = stdout_text(output)
        for name in MIN_ARGS:
            assert name in text
        assert 'start,end,name' in text
        runner.run.assert_not_called()

    def test_extra_arguments_ignored(self, dispatcher, runner):
        dispatcher.dispatch('extract-audio', ['video.mp4', 'audio.mp3', 'surplus'])

        assert invocations(runner)[0].args[-1] == 'audio.mp3'


class TestFfmpegVerbs:
    """Verbs that call ffmpeg directly"""

    def test_cut_plain_seconds(self, dispatcher, runner, output):
        assert dispatcher.dispatch('cut', ['v.mp4', '10', '40', 'out.mp4']) == 0

        [cmd] = invocations(runner)
        assert cmd.argv == ['ffmpeg', '-y', '-ss', '10', '-i', 'v.mp4', '-t', '30', '-c', 'copy', 'out.mp4']
        assert 'Done: out.mp4' in stdout_text(output)

    def test_cut_timestamps(self, dispatcher, runner):
        dispatcher.dispatch('cut', ['v.mp4', '00:00:10', '00:00:40', 'out.mp4'])

        [cmd] = invocations(runner)
        assert cmd.args[:6] == ['-y', '-ss', '00:00:10', '-to', '00:00:40', '-i']
        assert '-t' not in cmd.args

    def test_cut_reversed_range_runs_nothing(self, dispatcher, runner):
        with pytest.raises(UsageError):
            dispatcher.dispatch('cut', ['v.mp4', '40', '10', 'out.mp4'])

        runner.run.assert_not_called()

    def test_cut_precise(self, dispatcher, runner):
        dispatcher.dispatch('cut-precise', ['v.mp4', '90', '120', 'clip.mp4'])

        [cmd] = invocations(runner)
        assert '-t' in cmd.args and 'libx264' in cmd.args and 'aac' in cmd.args

    def test_resize(self, dispatcher, runner):
        dispatcher.dispatch('resize', ['video.mp4', '1280', '720', 'resized.mp4'])

        [cmd] = invocations(runner)
        assert 'scale=1280:720' in cmd.args
        assert cmd.args[-3:] == ['-c:a', 'copy', 'resized.mp4']

    def test_extract_audio(self, dispatcher, runner):
        dispatcher.dispatch('extract-audio', ['video.mp4', 'audio.mp3'])

        [cmd] = invocations(runner)
        assert '-vn' in cmd.args and 'libmp3lame' in cmd.args

    def test_process_failure_propagates(self, dispatcher, runner):
        runner.run.return_value = (1, '', 'Invalid data found')

        with pytest.raises(ProcessFailedError) as exc_info:
            dispatcher.dispatch('cut', ['v.mp4', '10', '40', 'out.mp4'])

        assert exc_info.value.exit_code == 1
        assert exc_info.value.program == 'ffmpeg'

    def test_missing_ffmpeg(self, dispatcher, runner):
        runner.require.side_effect = MissingToolError('ffmpeg not found')

        with pytest.raises(MissingToolError):
            dispatcher.dispatch('resize', ['video.mp4', '1280', '720', 'resized.mp4'])

        runner.run.assert_not_called()


class TestBatchCut:
    """batch-cut drives one cut per spec line"""

    def test_comment_blank_and_two_entries(self, dispatcher, runner, output, temp_dirs):
        spec = temp_dirs['temp'] / 'cuts.txt'
        spec.write_text('# intro and outro\n\n00:01:30,00:02:00,intro\n10,40,outro\n', encoding='utf-8')
        out_dir = temp_dirs['temp'] / 'clips' / 'nested'

        assert dispatcher.dispatch('batch-cut', ['video.mp4', str(spec), str(out_dir)]) == 0

        cmds = invocations(runner)
        assert len(cmds) == 2
        assert cmds[0].args[-1] == str(out_dir / 'intro.mp4')
        assert '-to' in cmds[0].args
        assert cmds[1].args[-1] == str(out_dir / 'outro.mp4')
        assert cmds[1].args[cmds[1].args.index('-t') + 1] == '30'
        assert out_dir.is_dir()
        assert 'Batch cut complete: 2 clips' in stdout_text(output)

    def test_missing_spec_file(self, dispatcher, runner, temp_dirs):
        with pytest.raises(UsageError, match='Timestamps file not found'):
            dispatcher.dispatch('batch-cut', ['video.mp4', str(temp_dirs['temp'] / 'nope.txt'), 'clips'])

        runner.run.assert_not_called()

    def test_malformed_line_runs_nothing(self, dispatcher, runner, temp_dirs):
        spec = temp_dirs['temp'] / 'cuts.txt'
        spec.write_text('0,10,first\n10,20\n', encoding='utf-8')

        with pytest.raises(UsageError, match='Line 2'):
            dispatcher.dispatch('batch-cut', ['video.mp4', str(spec), str(temp_dirs['output'])])

        runner.run.assert_not_called()

    def test_reversed_range_runs_nothing(self, dispatcher, runner, temp_dirs):
        spec = temp_dirs['temp'] / 'cuts.txt'
        spec.write_text('0,10,first\n40,10,backwards\n', encoding='utf-8')

        with pytest.raises(UsageError, match='Line 2: end'):
            dispatcher.dispatch('batch-cut', ['video.mp4', str(spec), str(temp_dirs['output'])])

        runner.run.assert_not_called()

    def test_failure_stops_batch(self, dispatcher, runner, temp_dirs):
        spec = temp_dirs['temp'] / 'cuts.txt'
        spec.write_text('0,10,a\n10,20,b\n20,30,c\n', encoding='utf-8')
        runner.run.side_effect = [(0, '', ''), (1, '', 'boom'), (0, '', '')]

        with pytest.raises(ProcessFailedError):
            dispatcher.dispatch('batch-cut', ['video.mp4', str(spec), str(temp_dirs['output'])])

        assert runner.run.call_count == 2


class TestConcat:
    """concat writes, uses and removes its manifest"""

    def test_manifest_contents_and_cleanup(self, dispatcher, runner, config):
        seen = {}

        def record_manifest(invocation, capture=False):
            manifest = Path(invocation.args[invocation.args.index('-i') + 1])
            seen['path'] = manifest
            seen['text'] = manifest.read_text(encoding='utf-8')
            return 0, '', ''

        runner.run.side_effect = record_manifest

        assert dispatcher.dispatch('concat', ['a.mp4', 'b.mp4', 'c.mp4', 'out.mp4']) == 0

        [cmd] = invocations(runner)
        assert cmd.args[:5] == ['-y', '-f', 'concat', '-safe', '0']
        assert cmd.args[-1] == 'out.mp4'
        assert seen['path'].parent == config.work_dir
        assert seen['text'].splitlines() == [
            f"file '{Path(name).resolve()}'" for name in ('a.mp4', 'b.mp4', 'c.mp4')
        ]
        assert not seen['path'].exists()
        assert list(config.work_dir.iterdir()) == []

    def test_manifest_removed_on_failure(self, dispatcher, runner, config):
        runner.run.return_value = (1, '', 'mismatched streams')

        with pytest.raises(ProcessFailedError):
            dispatcher.dispatch('concat', ['a.mp4', 'b.mp4', 'out.mp4'])

        assert list(config.work_dir.iterdir()) == []


class TestInfo:
    """info pretty-prints ffprobe JSON or falls back to raw output"""

    PROBE = {
        'streams': [
            {'index': 0, 'codec_type': 'video', 'codec_name': 'h264', 'width': 1920, 'height': 1080,
             'avg_frame_rate': '30/1'},
            {'index': 1, 'codec_type': 'audio', 'codec_name': 'aac', 'channels': 2,
             'sample_rate': '48000', 'tags': {'language': 'kat'}},
        ],
        'format': {'filename': 'v.mp4', 'format_name': 'mov,mp4,m4a,3gp,3g2,mj2',
                   'duration': '12.500000', 'size': '1048576', 'bit_rate': '671088'},
    }

    def test_structured_output(self, dispatcher, runner, output):
        runner.run.return_value = (0, json.dumps(self.PROBE), '')

        assert dispatcher.dispatch('info', ['v.mp4']) == 0

        [cmd] = invocations(runner)
        assert cmd.argv[:6] == ['ffprobe', '-v', 'quiet', '-print_format', 'json', '-show_format']
        text = stdout_text(output)
        assert '"codec_name": "h264"' in text
        assert '1920x1080' in text
        assert '12.50s' in text
        assert '1.0 MB' in text

    def test_falls_back_to_raw_probe_on_bad_json(self, dispatcher, runner, output):
        runner.run.side_effect = [(0, 'not json', ''), (0, '', '')]

        assert dispatcher.dispatch('info', ['v.mp4']) == 0

        cmds = invocations(runner)
        assert [c.argv for c in cmds][1] == ['ffprobe', 'v.mp4']
        assert 'raw ffprobe output' in stderr_text(output)

    def test_missing_file_attempts_both_probes(self, dispatcher, runner, output):
        runner.run.side_effect = [(1, '{\n\n}\n', ''), (1, '', '')]

        with pytest.raises(ProcessFailedError):
            dispatcher.dispatch('info', ['missing.mp4'])

        assert runner.run.call_count == 2
        assert 'exit code 1' in stderr_text(output)


class TestExternalScripts:
    """subs, clean-srt, thumbnail and face-crop"""

    def test_subs(self, dispatcher, runner, tools):
        dispatcher.dispatch('subs', ['video.mp4', 'subs.srt', 'output.mp4'])

        [cmd] = invocations(runner)
        assert cmd.argv == ['python3', str(tools.burn_subs_path), 'video.mp4', 'subs.srt', 'output.mp4']

    def test_clean_srt_script(self, dispatcher, runner, tools):
        dispatcher.dispatch('clean-srt', ['raw.srt', 'clean.srt'])

        [cmd] = invocations(runner)
        assert cmd.argv == ['python3', str(tools.clean_srt_path), 'raw.srt', 'clean.srt']

    def test_thumbnail(self, dispatcher, runner, output, tools):
        args = ['ep.mp4', 'ep.srt', 'L2 R1', 'ყველაფერი', 'სიზმარია', 'thumb.jpg']
        dispatcher.dispatch('thumbnail', args)

        [cmd] = invocations(runner)
        assert cmd.argv == [str(tools.thumbnail_path), 'full'] + args
        assert 'FAL_KEY' in stderr_text(output)

    def test_thumbnail_with_api_key(self, dispatcher, runner, output, tools):
        dispatcher.environ = {'FAL_KEY': 'secret'}
        dispatcher.dispatch('thumbnail', ['ep.mp4', 'ep.srt', 'L2', 'a', 'b', 'thumb.jpg'])

        assert 'FAL_KEY' not in stderr_text(output)

    def test_face_crop_placeholder(self, dispatcher, runner, output, tools):
        assert dispatcher.dispatch('face-crop', ['horizontal.mp4', 'vertical.mp4']) == 0

        runner.run.assert_not_called()
        assert 'placeholder' in stderr_text(output)
        assert 'vertical.mp4' in stdout_text(output)

    @pytest.mark.parametrize("verb,args", [
        ('subs', ['video.mp4', 'subs.srt', 'output.mp4']),
        ('clean-srt', ['raw.srt', 'clean.srt']),
        ('thumbnail', ['ep.mp4', 'ep.srt', 'L2', 'a', 'b', 'thumb.jpg']),
        ('face-crop', ['horizontal.mp4', 'vertical.mp4']),
    ])
    def test_missing_collaborator(self, dispatcher, runner, verb, args):
        with pytest.raises(MissingToolError) as exc_info:
            dispatcher.dispatch(verb, args)

        assert exc_info.value.exit_code == 1
        runner.run.assert_not_called()

    def test_clean_srt_builtin(self, dispatcher, runner, config, temp_dirs):
        config.clean_srt_backend = 'builtin'
        src = temp_dirs['temp'] / 'raw.srt'
        dst = temp_dirs['temp'] / 'clean.srt'
        src.write_text('1\n00:00:01,000 --> 00:00:02,000\nმმ, გამარჯობა\n', encoding='utf-8')

        assert dispatcher.dispatch('clean-srt', [str(src), str(dst)]) == 0

        runner.run.assert_not_called()
        assert dst.read_text(encoding='utf-8') == '1\n00:00:01,000 --> 00:00:02,000\nგამარჯობა\n'

    def test_clean_srt_builtin_missing_input(self, dispatcher, config, temp_dirs):
        config.clean_srt_backend = 'builtin'

        with pytest.raises(UsageError):
            dispatcher.dispatch('clean-srt', [str(temp_dirs['temp'] / 'none.srt'), 'out.srt'])
