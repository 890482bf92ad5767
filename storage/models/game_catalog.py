"""小游戏题库"""

from typing import List

from storage.models.game import Riddle, TriviaQuestion, WordPuzzle


# ── 选择题 ──────────────────────────────────────────────

TRIVIA_QUESTIONS: List[TriviaQuestion] = [
    TriviaQuestion(question="What is the capital of Japan?", options=["Seoul", "Tokyo", "Beijing", "Bangkok"], correct_index=1, category="Geography"),
    TriviaQuestion(question="Who painted the Mona Lisa?", options=["Van Gogh", "Picasso", "Leonardo da Vinci", "Michelangelo"], correct_index=2, category="Art"),
    TriviaQuestion(question="What is the largest planet in our solar system?", options=["Saturn", "Jupiter", "Neptune", "Uranus"], correct_index=1, category="Science"),
    TriviaQuestion(question="In what year did World War II end?", options=["1943", "1944", "1945", "1946"], correct_index=2, category="History"),
    TriviaQuestion(question="What is the chemical symbol for gold?", options=["Go", "Gd", "Au", "Ag"], correct_index=2, category="Science"),
    TriviaQuestion(question="Which planet is known as the Red Planet?", options=["Venus", "Mars", "Jupiter", "Mercury"], correct_index=1, category="Science"),
    TriviaQuestion(question="What is the smallest country in the world?", options=["Monaco", "Vatican City", "San Marino", "Liechtenstein"], correct_index=1, category="Geography"),
    TriviaQuestion(question="Who wrote 'Romeo and Juliet'?", options=["Charles Dickens", "William Shakespeare", "Jane Austen", "Mark Twain"], correct_index=1, category="Literature"),
    TriviaQuestion(question="What is the hardest natural substance on Earth?", options=["Gold", "Iron", "Diamond", "Platinum"], correct_index=2, category="Science"),
    TriviaQuestion(question="Which ocean is the largest?", options=["Atlantic", "Indian", "Arctic", "Pacific"], correct_index=3, category="Geography"),
    TriviaQuestion(question="What year was the first iPhone released?", options=["2005", "2006", "2007", "2008"], correct_index=2, category="Technology"),
    TriviaQuestion(question="What is the main ingredient in guacamole?", options=["Tomato", "Avocado", "Lime", "Onion"], correct_index=1, category="Food"),
    TriviaQuestion(question="Who discovered penicillin?", options=["Marie Curie", "Louis Pasteur", "Alexander Fleming", "Isaac Newton"], correct_index=2, category="Science"),
    TriviaQuestion(question="What is the capital of Australia?", options=["Sydney", "Melbourne", "Canberra", "Perth"], correct_index=2, category="Geography"),
    TriviaQuestion(question="How many bones are in the adult human body?", options=["196", "206", "216", "226"], correct_index=1, category="Science"),
]


# ── 谜语 ────────────────────────────────────────────────

RIDDLES: List[Riddle] = [
    Riddle(question="I have hands but can't clap. What am I?", answer="clock", hints=["I hang on walls", "I tell time"]),
    Riddle(question="The more you take, the more you leave behind. What am I?", answer="footsteps", hints=["Walking creates me", "I'm on the ground"]),
    Riddle(question="I speak without a mouth and hear without ears. What am I?", answer="echo", hints=["You hear me in mountains", "I repeat what you say"]),
    Riddle(question="I have cities, but no houses. Mountains, but no trees. Water, but no fish. What am I?", answer="map", hints=["You can fold me", "I help you navigate"]),
    Riddle(question="What has keys but no locks?", answer="keyboard", hints=["You type on me", "I'm used with computers"]),
    Riddle(question="I'm tall when I'm young and short when I'm old. What am I?", answer="candle", hints=["I give light", "I'm made of wax"]),
    Riddle(question="What can travel around the world while staying in a corner?", answer="stamp", hints=["I go on mail", "I'm usually paper"]),
    Riddle(question="What has a head and a tail but no body?", answer="coin", hints=["I'm metal", "You flip me"]),
    Riddle(question="What gets wetter the more it dries?", answer="towel", hints=["It's in your bathroom", "You use it after a shower"]),
    Riddle(question="What has many teeth but can't bite?", answer="comb", hints=["It's for your hair", "It's usually plastic"]),
]


# ── 单词重组 ────────────────────────────────────────────

WORD_PUZZLES: List[WordPuzzle] = [
    WordPuzzle(word="COMPUTER", scrambled="OMUPRECT", hint="Electronic device", category="Technology"),
    WordPuzzle(word="ELEPHANT", scrambled="TEPHANEL", hint="Large animal with trunk", category="Animals"),
    WordPuzzle(word="RAINBOW", scrambled="WONIBAR", hint="Colorful arc in sky", category="Nature"),
    WordPuzzle(word="MOUNTAIN", scrambled="NIATOMUN", hint="Very tall landform", category="Geography"),
    WordPuzzle(word="GUITAR", scrambled="RATIGU", hint="String instrument", category="Music"),
    WordPuzzle(word="CHOCOLATE", scrambled="CAHOTOLEC", hint="Sweet treat from cacao", category="Food"),
    WordPuzzle(word="BUTTERFLY", scrambled="TYLBUFRET", hint="Colorful flying insect", category="Animals"),
    WordPuzzle(word="ADVENTURE", scrambled="EDNUAVRET", hint="Exciting experience", category="Words"),
]
