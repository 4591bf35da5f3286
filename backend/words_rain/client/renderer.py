import pygame

from words_rain.services.games.models import EFFECT_SCORE, GameSession, Playfield

BACKGROUND = (236, 244, 250)
WORD_COLOR = (29, 45, 61)
TYPED_COLOR = (27, 127, 121)
TARGET_COLOR = (217, 93, 57)
DISSOLVE_COLOR = (42, 157, 143)
SCORE_COLOR = (217, 93, 57)
INPUT_ZONE = (255, 255, 255, 184)
INPUT_LINE = (7, 38, 70, 61)
INPUT_TEXT = (19, 42, 59)
ERROR_COLOR = (190, 40, 40)

INPUT_ZONE_HEIGHT = 44
HUD_HEIGHT = 40
SCORE_DRIFT = 22
DISSOLVE_DRIFT = 26

STATUS_LABELS = {
    'setup': 'Setup',
    'running': 'Running',
    'frozen': 'Speaking',
    'complete': 'Complete',
}


class PygameRenderer:
    """Draws the setup screen and the game onto a pygame surface.

    The playfield sits below a HUD strip; word coordinates are playfield
    coordinates.
    """

    def __init__(self, screen: pygame.Surface, playfield: Playfield):
        self.screen = screen
        self.playfield = playfield
        self.word_font = pygame.font.SysFont('trebuchetms', 30, bold=True)
        self.score_font = pygame.font.SysFont('trebuchetms', 24, bold=True)
        self.ui_font = pygame.font.SysFont('verdana', 16)
        self.title_font = pygame.font.SysFont('trebuchetms', 40, bold=True)
        self.field = pygame.Surface((playfield.width, playfield.height), pygame.SRCALPHA)

    def measure_text_width(self, text: str) -> float:
        return self.word_font.size(text)[0]

    def _text(self, font, text, color, pos, alpha=255, surface=None):
        rendered = font.render(text, True, color)
        if alpha < 255:
            rendered.set_alpha(alpha)
        (surface or self.screen).blit(rendered, pos)
        return rendered.get_width()

    def draw_game(self, session: GameSession, now: float) -> None:
        self.screen.fill(BACKGROUND)
        self._draw_hud(session)

        field = self.field
        field.fill((0, 0, 0, 0))
        zone_top = self.playfield.height - INPUT_ZONE_HEIGHT
        pygame.draw.rect(field, INPUT_ZONE, (0, zone_top, self.playfield.width, INPUT_ZONE_HEIGHT))
        pygame.draw.rect(field, INPUT_LINE, (0, zone_top, self.playfield.width, 2))

        for word in session.active_words:
            self._draw_word(session, word)
        self._draw_effects(session, now)
        self._text(self.ui_font, f"Input: {session.input_buffer}", INPUT_TEXT,
                   (14, self.playfield.height - 26), surface=field)

        self.screen.blit(field, (0, HUD_HEIGHT))
        if session.game_over:
            self._draw_result(session)

    def _draw_word(self, session, word):
        is_target = word.id == session.target_word_id
        typed = session.input_buffer if is_target else ''
        pos = (word.x, word.y)
        if typed and word.text.startswith(typed):
            done_width = self._text(self.word_font, typed, TYPED_COLOR, pos, surface=self.field)
            self._text(self.word_font, word.text[len(typed):], WORD_COLOR,
                       (word.x + done_width, word.y), surface=self.field)
        else:
            color = TARGET_COLOR if is_target else WORD_COLOR
            self._text(self.word_font, word.text, color, pos, surface=self.field)

    def _draw_effects(self, session, now):
        for effect in session.effects:
            t = effect.progress(now)
            alpha = int(255 * (1 - t))
            if effect.kind == EFFECT_SCORE:
                self._text(self.score_font, effect.text, SCORE_COLOR,
                           (effect.x, effect.y - t * SCORE_DRIFT), alpha, surface=self.field)
            else:
                self._text(self.word_font, effect.text, DISSOLVE_COLOR,
                           (effect.x, effect.y - t * DISSOLVE_DRIFT), alpha, surface=self.field)

    def _draw_hud(self, session):
        status = STATUS_LABELS.get(session.phase, '')
        hud = f"Score: {session.score}    Combo: {session.combo}    {status}    [F10] back"
        self._text(self.ui_font, hud, INPUT_TEXT, (14, 12))

    def _draw_result(self, session):
        width, height = 360, 150
        left = (self.screen.get_width() - width) // 2
        top = (self.screen.get_height() - height) // 2
        pygame.draw.rect(self.screen, (255, 255, 255), (left, top, width, height), border_radius=12)
        pygame.draw.rect(self.screen, TYPED_COLOR, (left, top, width, height), width=2, border_radius=12)
        self._text(self.title_font, 'Complete!', TYPED_COLOR, (left + 24, top + 16))
        self._text(self.ui_font, f"Final score: {session.final_score}", INPUT_TEXT, (left + 24, top + 74))
        self._text(self.ui_font, 'Press Enter to play again', INPUT_TEXT, (left + 24, top + 104))

    def draw_setup(self, setup) -> None:
        self.screen.fill(BACKGROUND)
        self._text(self.title_font, 'Words Rain', TYPED_COLOR, (40, 40))
        rows = [
            f"Wordbook:  < {setup.selected or '-'} >      (Up/Down)",
            f"Speed:     {setup.speed_level}      (Left/Right)",
            f"Accent:    {setup.accent}      (Tab)",
        ]
        if setup.max_words:
            rows.append(f"Max words: {setup.max_words}")
        rows.append('Press Enter to start' if setup.start_enabled else 'Game start disabled')
        for index, row in enumerate(rows):
            self._text(self.ui_font, row, INPUT_TEXT, (40, 120 + index * 32))
        if setup.error:
            self._text(self.ui_font, setup.error, ERROR_COLOR, (40, 130 + len(rows) * 32))
