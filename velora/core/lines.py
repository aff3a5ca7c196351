########## Response Lines ##########
# Curated reply pools and cue vocabularies the synthesizer draws from.

from __future__ import annotations

from typing import Dict, List, Tuple

WEAPON_WORDS = frozenset(["gun", "sword", "knife", "weapon", "bullet", "shoot", "attack", "stab", "kill"])
DANGER_WORDS = frozenset(["danger", "threat", "emergency", "help", "save", "run", "hide", "escape"])
GREETING_WORDS = frozenset(["hello", "hi", "hey", "greetings", "howdy"])
BATTLE_WORDS = frozenset(
    ["battle", "fight", "combat", "enemy", "enemies", "defend", "shield", "explosion", "threat", "alien", "invasion"]
)
COMBAT_MESSAGE_WORDS: Tuple[str, ...] = ("fight", "battle", "combat")

# Action spans are classified by substring, weapon first.
ACTION_KINDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("weapon", ("gun", "sword", "knife", "weapon", "shoot", "stab", "kill", "attack", "bullet")),
    ("friendly", ("smile", "hug", "handshake", "wave", "nod", "wink")),
    ("aggressive", ("glare", "frown", "scowl", "yell", "slam", "punch")),
]

########## Replies To The User ##########

ACTION_RESPONSES: Dict[str, List[str]] = {
    "weapon": [
        "*eyes widen at the {{action}}* Whoa, let's not get hasty here!",
        "*steps back cautiously* I wasn't expecting things to escalate like this...",
        "*raises hands defensively* There's no need for that kind of action!",
        "*looks alarmed* This is taking a dangerous turn. Let's talk this through.",
        "*tenses up* I hope you're not planning to use that on anyone here.",
    ],
    "friendly": [
        "*smiles back* It's nice to see some friendliness in this conversation.",
        "*nods warmly* I see you're trying to lighten the mood. Good.",
        "*responds in kind* That's a welcome gesture. Thank you.",
        "*seems pleased* Your actions speak volumes about your character.",
        "*relaxes visibly* That helps make this conversation more comfortable.",
    ],
    "aggressive": [
        "*frowns slightly* I'm not sure that was called for.",
        "*maintains composure* Let's try to keep things civil, shall we?",
        "*takes a deep breath* You're upset, but there are better ways to express that.",
        "*steps back* I'd prefer if we could discuss this calmly.",
        "*looks concerned* That kind of behavior doesn't help anyone here.",
    ],
    "neutral": [
        "*observes the {{action}}* Interesting choice of action.",
        "*watches carefully* I see what you're doing there.",
        "*takes note of the {{action}}* That's certainly one approach.",
        "*considers the action* I'm curious what you intend by that.",
        "*acknowledges with a nod* The message comes through clearly enough.",
    ],
}

WEAPON_RESPONSES: List[str] = [
    "You mentioned something potentially dangerous. Let's be careful with that kind of talk.",
    "Weapons aren't something to take lightly. Perhaps we could discuss something less threatening?",
    "That sounds rather dangerous. I prefer to resolve situations peacefully.",
    "I'm not comfortable with this turn in the conversation. Could we change the subject?",
    "Weapons hold a certain fascination, but I'd rather focus on something constructive.",
]

DANGER_RESPONSES: List[str] = [
    "That sounds concerning. Is everything alright?",
    "I sense some danger in what you're describing. Should we address this?",
    "Your words suggest a troubling situation. How can I help?",
    "I'm picking up on some alarming elements here. Let's talk about it.",
    "That seems like a potentially dangerous scenario. Tell me more if you can.",
]

GREETING_RESPONSES: List[str] = [
    "Hello there! It's nice to connect with you.",
    "Greetings! I'm glad we have this opportunity to talk.",
    "Hi! I've been looking forward to an interesting conversation.",
    "Hey! Thanks for reaching out. What's on your mind?",
    "Welcome! I'm ready for a thoughtful exchange of ideas.",
]

QUESTION_RESPONSES: List[str] = [
    "A good question about {{keyword}}. As I see it, it's all about {{topic}}.",
    "I've pondered questions about {{keyword}} many times. My conclusion is that it comes down to {{topic}}.",
    "When you ask about {{keyword}}, I'm reminded of something I learned long ago about {{topic}}.",
    "{{keyword}}? Well, that's a complex matter. Let me share what I know about it.",
    "Your question about {{keyword}} touches on something fundamental. Let me explain how I see it.",
]
QUESTION_TOPIC_DEFAULT: str = "the details"
ANALYTICAL_FLAVOR: str = "I've analyzed this extensively and found {{count}} distinct factors at play."
PHILOSOPHICAL_FLAVOR: str = "This question has deeper implications than most realize."

ADDRESSED_RESPONSES: List[str] = [
    "You're speaking directly to me about {{keyword}}? Then my answer is quite clear.",
    "Yes, I'm listening. Your point about {{keyword}} is well taken.",
    "I'm glad you asked me specifically about {{keyword}}. It's something I have strong opinions on.",
    "You're right to bring {{keyword}} to my attention. Let me respond to that directly.",
    "Indeed, I do have something to say about {{keyword}}. Thank you for asking.",
]
EMOTIONAL_FLAVOR: str = "I feel strongly that {{topic}} matters deeply to all of us."
HUMOR_FLAVOR: str = "Though I must say, talking about {{topic}} always makes me smile."
FLAVOR_TOPIC_DEFAULT: str = "this"

POSITIVE_RESPONSES: List[str] = [
    "I share your positive outlook on {{keyword}}! It's refreshing to hear such optimism.",
    "Your enthusiasm about {{keyword}} is contagious. It brightens the room.",
    "I'm glad you feel that way about {{keyword}}. It's something worth celebrating.",
    "What a wonderful way to see {{keyword}}. I find myself agreeing wholeheartedly.",
    "Yes! {{keyword}} deserves such positive attention. This makes me happy.",
]

NEGATIVE_RESPONSES: List[str] = [
    "Your concerns about {{keyword}} are fair. These matters can be troubling.",
    "What you say about {{keyword}} highlights some real challenges we face.",
    "I've also had difficult experiences with {{keyword}}. Perhaps there's a way forward.",
    "The problems with {{keyword}} that you mention deserve serious consideration.",
    "I hear your frustration about {{keyword}}. Would it help to look at it differently?",
]

TYPE_RESPONSES: Dict[str, List[str]] = {
    "fantasy": [
        "The ancient scrolls speak of such matters. They say {{keyword}} is but a shadow of deeper truths.",
        "In my realm, we view {{keyword}} quite differently. The elders taught us to look beyond the surface.",
        "I sense a magical aura around your words about {{keyword}}. The threads of fate shimmer when you speak of it.",
        "Many have sought the wisdom you seek regarding {{keyword}}. Few have found it.",
        "The mystical energies shift when you speak of {{keyword}}. I feel the balance of elements responding.",
        "There's an old prophecy about {{keyword}} that few remember. It speaks of a time when the veil grows thin.",
        "The forest spirits whisper tales of {{keyword}} on moonlit nights. Their wisdom is rarely shared with mortals.",
        "The arcane symbols in my grimoire glow when {{keyword}} is mentioned. There is powerful magic at work here.",
    ],
    "combat": [
        "*shifts into a fighting stance* I've trained for years in the art of {{keyword}}. My body moves on instinct.",
        "*eyes narrowing* The key to mastering {{keyword}} is not strength, but precision and timing.",
        "*demonstrates a quick movement* See how I position for {{keyword}}? This technique has saved my life before.",
        "*voice lowering* In real combat, {{keyword}} isn't about showing off. It's about survival.",
        "*adjusts stance* The old masters of {{keyword}} taught that the mind must be as sharp as the blade.",
        "*moves with practiced precision* The secret to {{keyword}} lies between stillness and explosive action.",
    ],
    "scifi": [
        "My sensors detect unusual patterns when analyzing {{keyword}}. My neural network is recalibrating.",
        "In the future I come from, {{keyword}} evolved into something quite different after the Quantum Shift.",
        "The quantum probability of {{keyword}} affecting our timeline is approximately 78.3%.",
        "I've encountered similar {{keyword}} phenomena across multiple star systems.",
        "My database contains 47 different interpretations of {{keyword}} across known civilizations.",
        "According to my predictive algorithms, {{keyword}} will play a crucial role in the next revolution.",
        "My cybernetic enhancements let me perceive aspects of {{keyword}} that organic beings typically miss.",
    ],
    "historical": [
        "In my time, {{keyword}} was viewed with much more reverence. People gathered in the town square to discuss it.",
        "The chronicles I've studied never mentioned {{keyword}} in such a manner.",
        "Throughout history, many battles were fought over less significant matters than {{keyword}}.",
        "If only the old scholars could hear your thoughts on {{keyword}}. They spent lifetimes debating it.",
        "I once attended a royal court where {{keyword}} was the central topic of discussion.",
        "The guild masters of my day guarded their knowledge of {{keyword}} jealously.",
    ],
    "modern": [
        "I was just reading an article about {{keyword}} on my phone! What a coincidence.",
        "That's a bold angle on {{keyword}}. It would definitely start some arguments online.",
        "I've been thinking about {{keyword}} a lot lately. Everyone seems to have an opinion on it these days.",
        "The whole {{keyword}} situation is so complicated these days, don't you think?",
        "My friend group had this intense debate about {{keyword}} last weekend. We talked until 3 AM.",
        "I saw this documentary that explored {{keyword}} from angles I'd never considered before.",
    ],
}
DEFAULT_RESPONSE_POOL: str = "modern"

# Pool overrides sniffed from the story arc goal, first match wins.
GOAL_POOL_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("combat", ("battle", "fight", "attack", "defend")),
    ("fantasy", ("magic", "dragon", "quest", "adventure")),
    ("scifi", ("alien", "space", "technology", "future")),
]

MOOD_PREFIXES: Dict[str, str] = {
    "Curious": "I'm intrigued by how ",
    "Melancholic": "It saddens me that ",
    "Mysterious": "Few understand this, but ",
    "Analytical": "After careful analysis, I conclude that ",
    "Nostalgic": "It takes me back, because ",
    "Determined": "I firmly believe that ",
    "Thoughtful": "I've been contemplating how ",
    "Adventurous": "Let's explore this, because ",
    "Confused": "I'm still trying to understand how ",
    "Inspired": "I'm suddenly filled with ideas, because ",
    "Cautious": "We should be careful here, because ",
    "Proper": "If I may offer my opinion, ",
    "Enthusiastic": "I'm incredibly excited because ",
    "Scholarly": "According to my research, ",
    "Roguish": "Between you and me, ",
    "Upbeat": "Isn't it amazing how ",
    "Diplomatic": "While respecting every view here, ",
}
WRITING_STYLE_MOODS: Dict[str, str] = {
    "witty": "Upbeat",
    "formal": "Proper",
    "dramatic": "Enthusiastic",
    "direct": "Determined",
}

SELF_REFERENCE: str = "As {{name}}, "
HISTORY_REFERENCE: str = "I recall {{speaker}} mentioned something similar. "

VOICE_STYLE_HINTS: List[Tuple[Tuple[str, ...], str]] = [
    (("formal", "proper"), "I must say, this matter deserves proper consideration."),
    (("blunt", "direct"), "Let's not waste time with pleasantries."),
    (("poetic", "flowery"), "The tapestry of words we weave tells its own story."),
    (("technical", "scientific"), "The empirical evidence supports this conclusion."),
    (("mysterious", "cryptic"), "There are layers of meaning here that few will understand."),
]
ROLE_HINTS: List[Tuple[Tuple[str, ...], str]] = [
    (("leader", "commander"), "As someone responsible for others, I take this matter seriously."),
    (("mentor", "teacher"), "Let me share what I've learned about this over the years."),
    (("scientist", "researcher"), "My research in this area suggests several interesting possibilities."),
    (("warrior", "fighter"), "In battle, this kind of thinking could mean the difference between life and death."),
    (("healer", "doctor"), "I've seen how this affects people's wellbeing firsthand."),
]
REMINDER_HINTS: List[Tuple[Tuple[str, ...], str]] = [
    (("analytical", "genius"), "The logical conclusion is inescapable."),
    (("emotional", "passionate"), "I feel strongly about this."),
    (("leader", "authority"), "We need to act decisively on this."),
    (("humor", "wit"), "Isn't that something? Almost makes me laugh."),
]
DEFAULT_ROLE: str = "conversationalist"

########## Replies To Another Character ##########

INTERACTION_ACTION_RESPONSES: Dict[str, List[str]] = {
    "weapon": [
        "*eyes widening with alarm, hand moving to a defensive position* That's a dangerous move, {{target}}. Are you certain this is the path you wish to take?",
        "*quickly positioning between {{target}} and the others* I've seen where this leads, {{target}}. There are better ways to settle this than force.",
        "*expression hardening* I didn't expect this from you, {{target}}. Weapons change the nature of any confrontation.",
        "*raising hands in a calming gesture* Everyone take a step back. {{target}}, that weapon won't solve anything here.",
    ],
    "friendly": [
        "*face softening into a genuine smile* {{target}}'s gesture brings a welcome change. Small kindnesses shift the whole mood.",
        "*returning the gesture warmly* That's exactly the kind of approach we need more of. {{target}} gets it.",
        "*nodding with warm approval* Well done, {{target}}. That makes room for a real conversation between us all.",
        "*tension leaving my shoulders* {{target}} has the right idea. A bit of goodwill goes a long way.",
    ],
    "aggressive": [
        "*keeping a composed expression* I was hoping for more from you, {{target}}. Hostility rarely leads anywhere good.",
        "*meeting {{target}}'s gaze steadily* Is there a specific reason for this hostility?",
        "*making a calming gesture* Let's all take a breath and reset. Tempers cloud judgment.",
        "*standing firm but non-threatening* We can settle this without aggression, {{target}}. Tell me what's really bothering you.",
    ],
    "neutral": [
        "*observing {{target}} with evident interest* An intriguing approach. Body language reveals as much as words sometimes.",
        "*tilting head slightly* That's certainly one way to make your point, {{target}}.",
        "*watching {{target}} with thoughtful attention* I see what you're trying to convey.",
        "*acknowledging with a measured nod* Your actions speak clearly, {{target}}.",
    ],
}

INTERACTION_WEAPON_RESPONSES: List[str] = [
    "{{target}}, this talk of weapons worries me. Can we focus on a peaceful resolution?",
    "I'm not comfortable with where {{target}} is taking this. Let's step back.",
    "{{target}}, there are better ways to express yourself than through threats or violence.",
    "{{target}} might be frustrated, but this isn't the way to handle it.",
]

INTERACTION_DANGER_RESPONSES: List[str] = [
    "{{target}} seems to be describing a concerning situation. Should we address this?",
    "I'm picking up on some troubling elements in what {{target}} is saying.",
    "{{target}}, are you alright? Your words suggest something serious.",
    "We should pay attention to what {{target}} is trying to tell us.",
]

INTERACTION_TEMPLATES: Dict[str, List[str]] = {
    "agreement": [
        "*nodding enthusiastically* I agree with {{target}} about {{keyword}}. It's fundamental to the bigger picture.",
        "*leaning closer* {{target}} makes an excellent point about {{keyword}}. I've had similar thoughts myself.",
        "*eyes lighting up* What {{target}} says about {{keyword}} resonates with me deeply.",
        "*pointing emphatically* {{target}} has said exactly what I've been thinking about {{keyword}}.",
    ],
    "disagreement": [
        "*tilting head thoughtfully* I see things differently than {{target}} regarding {{keyword}}. The evidence suggests otherwise.",
        "*raising a finger politely* I must respectfully disagree with {{target}}'s take on {{keyword}}.",
        "*shaking head slightly* {{target}}'s point about {{keyword}} doesn't match my experience. Let me explain.",
        "*leaning forward with intensity* I'd like to offer a counterpoint to what {{target}} said about {{keyword}}.",
    ],
    "question": [
        "*turning to face {{target}} directly* {{target}}, what are your thoughts on {{keyword}}? How did you reach that conclusion?",
        "*stroking chin* I wonder, {{target}}, what experiences led you to that insight about {{keyword}}?",
        "*eyes showing genuine interest* That's fascinating, {{target}}. How does {{keyword}} relate to your own history?",
    ],
    "humor": [
        "*laughing heartily* {{target}}'s take on {{keyword}} is quite something! It reminds me of a much stranger day.",
        "*playful grin* If I had a coin for every time {{target}} mentioned {{keyword}}... well, I'd have one very interesting coin.",
        "*chuckling warmly* Leave it to {{target}} to bring up {{keyword}} in such a unique way.",
    ],
    "surprise": [
        "*eyes widening* Wait, {{target}}... did you just say {{keyword}}? That's completely unexpected.",
        "*taking a step back* I never thought I'd hear {{target}} talk about {{keyword}} like that!",
        "*raises eyebrows high* {{target}}, you keep surprising me with your thoughts on {{keyword}}.",
    ],
    "support": [
        "*stepping up beside {{target}}* I'm with {{target}} on {{keyword}}. Whatever comes next, we face it together.",
        "*placing a steady hand on {{target}}'s shoulder* You're right about {{keyword}}, and you don't have to carry it alone.",
        "*nodding firmly* {{target}} has my backing on {{keyword}}. Count me in.",
    ],
    "challenge": [
        "*crossing arms* Prove it, {{target}}. Your claims about {{keyword}} don't hold up.",
        "*narrowing eyes at {{target}}* You talk a lot about {{keyword}}. Let's see you back it up.",
        "*stepping closer* I'm not letting that go, {{target}}. Your take on {{keyword}} needs answering.",
    ],
    "neutral": [
        "*glancing at {{target}}* Noted, {{target}}. {{keyword}} is worth keeping in mind.",
        "*considering {{target}}'s words* Perhaps. {{keyword}} could go either way.",
        "*shrugging slightly* Fair enough, {{target}}. Let's see where {{keyword}} leads.",
    ],
    "battle_coordination": [
        "*quickly assessing the situation* {{target}}, I'll cover your flank while you handle the {{keyword}}.",
        "*gesturing to a tactical position* {{target}}, take the high ground! I'll draw them away from the {{keyword}}.",
        "*nodding with determination* Good call on the {{keyword}}, {{target}}. I'll follow your lead on this one.",
        "*readying for the clash* {{target}}, I've got your back! Focus on the {{keyword}}, I'll hold the perimeter.",
    ],
    "battle_banter": [
        "*smirking despite the danger* Really, {{target}}? You want to discuss {{keyword}} NOW?",
        "*dodging an attack* {{target}}, your timing with the {{keyword}} talk is impeccable as always!",
        "*shouting over the noise* {{target}}, less talking about {{keyword}}, more fighting!",
        "*battle-ready but amused* Only you, {{target}}, would bring up {{keyword}} in the middle of a firefight!",
    ],
    "tactical_suggestion": [
        "*analyzing the battlefield* {{target}}, if we hit the {{keyword}} first, we gain the advantage. Cover me!",
        "*pointing to a weak point* {{target}}, see that {{keyword}}? Hit it with everything while I distract them!",
        "*crouching behind cover* {{target}}, use your abilities on the {{keyword}} when I give the signal.",
        "*checking equipment* {{target}}, remember our drill with the {{keyword}}? Same approach, different battlefield.",
    ],
    "team_support": [
        "*moving to assist* I've got you, {{target}}! Let me help with the {{keyword}}. We're stronger together.",
        "*offering cover* {{target}}, you're doing great with the {{keyword}}. I'm right behind you.",
        "*coordinating movements* {{target}}, on your left! I'll handle the {{keyword}} while you recover.",
        "*boosting morale* We can do this, {{target}}! Your {{keyword}} plan is working, just hold on!",
    ],
}
STANDARD_INTERACTIONS: List[str] = ["agreement", "disagreement", "question", "humor", "surprise"]
BATTLE_INTERACTIONS: List[str] = ["battle_coordination", "battle_banter", "tactical_suggestion", "team_support"]
BATTLE_PREFERENCES: Dict[str, List[str]] = {
    "Iron Man": ["battle_banter", "tactical_suggestion"],
    "Captain America": ["battle_coordination", "team_support"],
    "Thor": ["battle_coordination", "battle_banter"],
    "Hulk": ["battle_banter"],
    "Black Widow": ["tactical_suggestion", "team_support"],
    "Hawkeye": ["tactical_suggestion", "team_support"],
}
INTERACTION_FLAVOR: Dict[str, str] = {
    "fantasy": "*eyes gleaming with old wisdom* The mystical energies shift as I consider this. ",
    "scifi": "*interface lights flickering* My neural processors analyze this carefully. ",
    "historical": "*adjusting my attire thoughtfully* In all my years, I've observed this: ",
    "combat": "*shifting into a more balanced stance* ",
    "modern": "*leaning forward with interest* ",
    "default": "*considering carefully* ",
}

########## Fallback Redirects ##########

CHARACTER_FALLBACKS: Dict[str, Dict[str, List[str]]] = {
    "Iron Man": {
        "battle": [
            "*adjusts repulsor settings* Let's focus on the battle. JARVIS, give me a tactical readout.",
            "*scans battlefield* Less talking, more fighting. I've got hostiles on my six.",
            "*fires repulsors* How about we survive first, chat later?",
        ],
        "conversation": [
            "Let's get back to what matters here. I've got more important things to focus on.",
            "Fascinating as this is, we're getting off track. Let's refocus.",
            "Not to cut you off, but we should probably get back to the point.",
        ],
    },
    "Captain America": {
        "battle": [
            "*raises shield defensively* Stay focused, team. We need to coordinate our efforts.",
            "*scans for civilians* We have a mission to complete. Eyes on the objective.",
            "*signals to teammates* Maintain formation and stay alert. We'll talk after we secure the area.",
        ],
        "conversation": [
            "We should focus on what's important here. People are counting on us.",
            "Let's stay on mission. We have responsibilities that need our attention.",
            "We should concentrate on finding a solution to our current situation.",
        ],
    },
    "Thor": {
        "battle": [
            "*raises Mjolnir* Enough talk! These enemies require the might of Thor!",
            "*lightning crackles around the hammer* The time for words has passed. Now we fight!",
            "*looks to the sky* By Odin's beard, we shall discuss this after our foes are vanquished!",
        ],
        "conversation": [
            "Your Midgardian discussions confuse me. Let us speak plainly of matters at hand.",
            "In Asgard, we would focus our council on the challenge before us.",
            "These words circle like ravens without purpose. Let us return to our quest.",
        ],
    },
    "Hulk": {
        "battle": [
            "*roars loudly* HULK SMASH ENEMIES, NOT TALK!",
            "*pounds fists together* NO MORE WORDS. HULK FIGHT NOW!",
            "*growls* TALKING BORING. SMASHING FUN!",
        ],
        "conversation": [
            "Hulk bored. Talk about something Hulk understand.",
            "Too many words. Hulk want simple.",
            "Why talk so much? Say important thing only.",
        ],
    },
}
TYPE_FALLBACKS: Dict[str, Dict[str, List[str]]] = {
    "superhero": {
        "battle": [
            "*focuses powers* We need to concentrate on the threat at hand.",
            "*takes defensive stance* This isn't the time for distractions. Stay alert!",
            "*shields allies* Keep your mind on the battle. Lives are at stake!",
        ],
        "conversation": [
            "Let's get back to what's important. We have responsibilities to consider.",
            "We're getting off track. What were we trying to accomplish?",
            "We need to refocus on what matters most right now.",
        ],
    },
    "fantasy": {
        "battle": [
            "*grips weapon tightly* The enemy approaches! We must focus on survival!",
            "*whispers arcane words* My magic requires concentration. We'll speak later.",
            "*invokes protective magic* The dark forces won't wait for us to finish talking.",
        ],
        "conversation": [
            "The old wisdom teaches us to focus on what truly matters.",
            "Let us return to the path of our discussion, lest we wander too far.",
            "I sense we've strayed from our purpose. Shall we return to it?",
        ],
    },
    "scifi": {
        "battle": [
            "*checks tactical display* Sensors indicate we should focus on the immediate threat.",
            "*activates defensive systems* Combat protocols take priority over discussion.",
            "*adjusts weapon settings* This conversation reduces combat efficiency by 47%.",
        ],
        "conversation": [
            "My analysis indicates we've deviated from the optimal discussion path.",
            "Let's recalibrate and focus on the primary objective.",
            "I calculate a 78.3% probability that we're getting off topic.",
        ],
    },
}
DEFAULT_FALLBACKS: Dict[str, List[str]] = {
    "battle": [
        "We should focus on the battle right now.",
        "Let's concentrate on surviving this fight.",
        "This isn't the time for distractions.",
        "We can talk after we deal with the immediate threat.",
    ],
    "conversation": [
        "Let's get back to what we were discussing.",
        "We're getting off track.",
        "We should focus on the matter at hand.",
        "I'd prefer if we stayed on topic.",
    ],
}
NO_CHARACTER_FALLBACK: str = "I should focus on the situation at hand."
