from typeattack.enums import InputFlash, SoundKind, WordType
from typeattack.models import Phase, Scene
from typeattack.progression import BOSS_BADGE


def started(make_session, clock, **overrides):
    s = make_session(**overrides)
    s.start()
    # no spawn until the test moves the clock past the interval
    s.last_spawn = clock()
    return s


def type_text(s, text):
    return [s.handle_key(ch) for ch in text]


def test_start_enters_game(make_session, ui, audio):
    s = make_session()
    assert s.phase is Phase.IDLE
    assert s.start() is True
    assert s.phase is Phase.PLAYING
    assert ui.screen is Scene.GAME
    assert ui.hud.lives == 3 and ui.hud.level == 1
    assert audio.ambience is True
    assert s.start() is False


def test_first_tick_spawns_then_waits_for_interval(make_session, clock):
    s = make_session()
    s.start()
    s.tick()
    assert len(s.words) == 1
    clock.advance(1.0)
    s.tick()
    assert len(s.words) == 1
    clock.advance(1.0)
    s.tick()
    assert len(s.words) == 2


def test_pause_freezes_motion_and_resume_does_not_burst(make_session, clock, put_word, audio):
    s = started(make_session, clock)
    w = put_word(s.words, "cat", y=100, speed=2.0)

    assert s.pause() is True
    assert audio.ambience is False
    clock.advance(30.0)
    assert s.tick() is False
    assert w.y == 100

    assert s.resume() is True
    assert s.tick() is True
    assert w.y == 102
    assert len(s.words) == 1


def test_escape_toggles_pause_and_keys_are_ignored_while_paused(make_session, clock, put_word):
    s = started(make_session, clock)
    put_word(s.words, "cat")
    s.handle_key("Escape")
    assert s.phase is Phase.PAUSED
    assert s.handle_key("c") is None
    assert s.state.current_input == ""
    s.handle_key("Escape")
    assert s.phase is Phase.PLAYING


def test_completing_a_word_scores_and_explodes(make_session, clock, put_word, audio, ui):
    s = started(make_session, clock)
    put_word(s.words, "cat")

    type_text(s, "cat")

    assert s.state.score == 30
    assert s.state.words_destroyed == 1
    assert len(s.words) == 0
    assert len(s.particles) > 0
    assert audio.played.count(SoundKind.TYPE) == 2
    assert audio.played.count(SoundKind.EXPLODE) == 1
    assert ui.hud.score == 30


def test_mistake_penalty_and_fail_sound_debounce(make_session, clock, audio, ui):
    s = started(make_session, clock)
    s.state.score = 20

    s.handle_key("q")
    clock.advance(0.1)
    s.handle_key("q")
    clock.advance(0.1)
    s.handle_key("q")

    assert s.state.score == 5
    assert s.state.mistakes == 3
    assert audio.played.count(SoundKind.ERROR) == 3
    assert audio.played.count(SoundKind.FAIL) == 2
    assert ui.count("flash_input") == 3
    assert ("flash_input", InputFlash.ERROR) in ui.calls


def test_every_fifth_mistake_costs_a_life(make_session, clock, ui):
    s = started(make_session, clock)
    for _ in range(4):
        s.handle_key("q")
    assert s.state.lives == 3
    s.handle_key("q")
    assert s.state.lives == 2
    assert ui.count("shake") == 1


def test_miss_releases_active_word_and_costs_life(make_session, clock, put_word, ui):
    s = started(make_session, clock)
    w = put_word(s.words, "cat", y=610, speed=1.0)
    s.handle_key("c")
    assert s.state.active_word == w.id

    s.tick()

    assert s.state.lives == 2
    assert s.state.current_input == ""
    assert s.state.active_word is None
    assert ui.count("shake") == 1


def test_game_over_fires_once(make_session, clock, put_word, ui, audio):
    s = started(make_session, clock, lives=1)
    s.state.score = 80
    put_word(s.words, "cat", y=610)
    put_word(s.words, "dog", y=610)

    s.tick()

    assert s.phase is Phase.GAME_OVER
    assert len(ui.stats) == 1
    stats = ui.stats[0]
    assert stats.score == 80 and stats.is_new_record and stats.high_score == 80
    assert s.store.value == 80 and s.store.writes == 1
    assert audio.played.count(SoundKind.GAME_OVER) == 1
    assert ui.screen is Scene.OVER
    assert s.game_over() is None
    assert s.tick() is False


def test_game_over_without_record_keeps_store(make_session, clock, put_word, ui):
    s = make_session(lives=1)
    s.high_score = 500
    s.start()
    s.last_spawn = clock()
    put_word(s.words, "cat", y=610)

    s.tick()

    assert ui.stats[0].is_new_record is False
    assert ui.stats[0].high_score == 500
    assert s.store.writes == 0


def test_nuke_clears_screen_and_scores_everything(make_session, clock, put_word, ui, audio):
    s = started(make_session, clock)
    put_word(s.words, "cat", kind=WordType.NUKE)
    put_word(s.words, "dog")
    put_word(s.words, "emu")
    s.handle_key("d")
    s.handle_key("Backspace")
    type_text(s, "cat")

    assert len(s.words) == 0
    assert s.state.score == 30 + 75 + 2 * 10
    assert s.state.words_destroyed == 3
    assert s.state.current_input == ""
    assert s.state.active_word is None
    assert ui.count("flash_nuke") == 1
    assert SoundKind.POWERUP in audio.played


def test_freeze_stops_motion_and_spawning_until_it_expires(make_session, clock, put_word):
    s = started(make_session, clock)
    put_word(s.words, "cat", kind=WordType.FREEZE)
    dog = put_word(s.words, "dog", y=100, speed=1.0)

    type_text(s, "cat")
    assert s.state.is_frozen
    assert s.state.score == 105

    clock.advance(3.0)
    s.tick()
    assert dog.y == 100
    assert len(s.words) == 1

    clock.advance(0.6)
    s.tick()
    assert not s.state.is_frozen
    assert dog.y == 101
    assert len(s.words) == 2


def test_level_up_modal_halts_the_field(make_session, clock, put_word, ui):
    s = started(make_session, clock)
    put_word(s.words, "abcdefghijklmno")
    dog = put_word(s.words, "dog", y=100, speed=1.0)
    hidden_before = ui.count("hide_modal")

    type_text(s, "abcdefghijklmno")

    assert s.state.level == 2
    assert ("modal", 2, "LEVEL UP", False) in ui.calls
    s.tick()
    assert dog.y == 100
    assert len(s.words) == 1

    clock.advance(1.0)
    s.tick()
    assert dog.y == 101
    assert ui.count("hide_modal") == hidden_before

    clock.advance(1.0)
    s.tick()
    assert ui.count("hide_modal") == hidden_before + 1


def test_reset_discards_timers_of_old_session(make_session, clock, put_word):
    s = started(make_session, clock)
    put_word(s.words, "cat", kind=WordType.FREEZE)
    type_text(s, "cat")
    old = s.progress
    old_id = s.session_id

    s.reset()
    s.start()

    assert s.session_id == old_id + 2
    assert s.progress is not old
    assert old.freeze.armed is False
    assert s.state.is_frozen is False
    assert s.state.score == 0
    clock.advance(5.0)
    s.tick()
    assert s.state.is_frozen is False


def test_quit_goes_back_to_menu(make_session, clock, ui):
    s = started(make_session, clock)
    s.pause()
    s.quit()
    assert s.phase is Phase.IDLE
    assert ui.screen is Scene.MENU


def test_mute_toggle_controls_ambience(make_session, clock, audio):
    s = started(make_session, clock)
    assert s.toggle_mute() is True
    assert audio.ambience is False
    assert s.toggle_mute() is False
    assert audio.ambience is True


def test_broken_audio_does_not_stop_the_game(make_session, clock, put_word, audio):
    def boom(kind):
        raise RuntimeError("no device")

    audio.play = boom
    s = started(make_session, clock)
    put_word(s.words, "cat")
    type_text(s, "cat")
    assert s.state.score == 30


def test_tick_with_explicit_time_closes_timed_windows(make_session, clock, put_word):
    s = started(make_session, clock)
    put_word(s.words, "cat", kind=WordType.FREEZE)
    type_text(s, "cat")
    assert s.state.is_frozen

    assert s.tick(clock() + 10.0) is True

    assert not s.state.is_frozen
    assert s.progress.freeze.armed is False
    assert len(s.words) == 1


def test_boss_level_up_tells_the_ui_it_is_a_boss_wave(make_session, clock, ui):
    s = started(make_session, clock, boss_every_levels=2)
    s.add_score(150)
    assert ("modal", 2, BOSS_BADGE, True) in ui.calls


def test_dismissing_the_level_up_modal_keeps_the_spawn_pause(make_session, clock, ui):
    s = started(make_session, clock)
    assert s.dismiss_level_up_modal() is False

    s.add_score(150)
    hidden = ui.count("hide_modal")
    assert s.dismiss_level_up_modal() is True
    assert ui.count("hide_modal") == hidden + 1
    assert s.state.modal_pause is True
    assert s.dismiss_level_up_modal() is False

    clock.advance(2.5)
    s.tick()
    assert s.state.modal_pause is False
    assert ui.count("hide_modal") == hidden + 1
