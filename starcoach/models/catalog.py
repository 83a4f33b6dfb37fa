"""The closed set of leadership principles and the static fallback question bank."""
import re
from typing import Dict, List, Optional

from models.schemas import Question, StarHints

# (id, title, description)
LEADERSHIP_PRINCIPLES = [
    ("customer-obsession", "Customer Obsession",
     "Starts with the customer and works backwards; earns and keeps customer trust."),
    ("ownership", "Ownership",
     "Thinks long term, acts on behalf of the whole company and never says 'that's not my job'."),
    ("invent-and-simplify", "Invent and Simplify",
     "Expects innovation, looks for new ideas everywhere and keeps finding ways to simplify."),
    ("are-right-a-lot", "Are Right, A Lot",
     "Shows strong judgment and good instincts, seeks diverse perspectives and disconfirms own beliefs."),
    ("learn-and-be-curious", "Learn and Be Curious",
     "Never done learning; curious about new possibilities and acts to explore them."),
    ("hire-and-develop-the-best", "Hire and Develop the Best",
     "Raises the bar with every hire and promotion and coaches others seriously."),
    ("insist-on-the-highest-standards", "Insist on the Highest Standards",
     "Holds relentlessly high standards so defects do not get sent down the line."),
    ("think-big", "Think Big",
     "Creates and communicates a bold direction that inspires results."),
    ("bias-for-action", "Bias for Action",
     "Values speed; many decisions are reversible and do not need extensive study."),
    ("frugality", "Frugality",
     "Accomplishes more with less; constraints breed resourcefulness and invention."),
    ("earn-trust", "Earn Trust",
     "Listens attentively, speaks candidly and treats others respectfully."),
    ("dive-deep", "Dive Deep",
     "Operates at all levels, stays connected to details and audits frequently."),
    ("have-backbone-disagree-and-commit", "Have Backbone; Disagree and Commit",
     "Challenges decisions respectfully when disagreeing, then commits wholly once decided."),
    ("deliver-results", "Deliver Results",
     "Focuses on key inputs and delivers them with the right quality and in a timely fashion."),
    ("strive-to-be-earths-best-employer", "Strive to be Earth's Best Employer",
     "Works to create a safer, more productive, more diverse and more just work environment."),
    ("success-and-scale-bring-broad-responsibility", "Success and Scale Bring Broad Responsibility",
     "Considers the secondary effects of actions on communities and the world."),
]

# title -> [(question, context, (situation, task, action, result))]
FALLBACK_QUESTIONS = {
    "Customer Obsession": [
        ("Tell me about a time you chose what was best for the customer over what was easier for your team.",
         "Pick a case where customer needs conflicted with internal constraints.",
         ("Describe the customer and their need", "What were you responsible for?",
          "How did you advocate for the customer?", "What changed for the customer?")),
        ("Describe a time you used customer feedback to change a product or process.",
         "Show how you gathered the feedback and acted on it.",
         ("Where did the feedback come from?", "What problem did it reveal?",
          "What did you change and how?", "How did customers respond?")),
        ("Tell me about a time you went above and beyond for a customer.",
         "Focus on earning long-term trust, not a single transaction.",
         ("Who was the customer?", "What did they expect from you?",
          "What extra steps did you take?", "What was the lasting impact?")),
    ],
    "Ownership": [
        ("Describe a time you took on something outside your area because it was the right thing to do.",
         "Think of a gap nobody owned that you closed.",
         ("What was the gap?", "Why did you feel responsible?",
          "How did you take initiative?", "What was the long-term impact?")),
        ("Tell me about a time you made a decision that traded short-term results for long-term value.",
         "Show long-term thinking under short-term pressure.",
         ("What pressures existed?", "What decision did you own?",
          "How did you weigh the trade-off?", "How did it play out over time?")),
        ("Describe a project that failed on your watch and what you did about it.",
         "Own the outcome rather than assigning blame.",
         ("What was the project?", "What were you accountable for?",
          "How did you respond to the failure?", "What did you learn and change?")),
    ],
    "Invent and Simplify": [
        ("Tell me about a time you invented a solution or simplified a complex process.",
         "Focus on innovation that created measurable value.",
         ("What was complex?", "What needed to change?",
          "How did you design the solution?", "What efficiency did it create?")),
        ("Describe a time you removed unnecessary steps from how your team worked.",
         "Show how simplification improved speed or quality.",
         ("What was the old process?", "Why did it need simplifying?",
          "What did you remove or redesign?", "What improved, by how much?")),
        ("Tell me about an idea you brought in from outside your team or industry.",
         "Highlight looking for ideas everywhere.",
         ("Where did the idea come from?", "What problem did it address?",
          "How did you adapt and introduce it?", "What was the result?")),
    ],
    "Are Right, A Lot": [
        ("Tell me about a time you made a judgment call that turned out to be right despite pushback.",
         "Show the reasoning behind the judgment.",
         ("What was the decision?", "What was at stake?",
          "How did you reach your view?", "How was it proven right?")),
        ("Describe a time you changed your mind after seeking a different perspective.",
         "Show that you work to disconfirm your own beliefs.",
         ("What was your original view?", "Why did you seek other input?",
          "What perspective changed your mind?", "What was the better outcome?")),
        ("Tell me about a decision you got wrong and how you realized it.",
         "Focus on how you detected and corrected the error.",
         ("What was the decision?", "What did you expect?",
          "How did you notice and respond?", "What do you do differently now?")),
    ],
    "Learn and Be Curious": [
        ("Tell me about a time you taught yourself a new skill to solve a problem.",
         "Show self-directed learning tied to results.",
         ("What problem needed the skill?", "What did you need to learn?",
          "How did you learn it?", "How did it change the outcome?")),
        ("Describe a time your curiosity led you to an unexpected insight.",
         "Highlight exploration beyond your immediate task.",
         ("What sparked your curiosity?", "What were you trying to understand?",
          "How did you explore it?", "What insight came out of it?")),
        ("Tell me about the most important thing you learned in the last year and how you used it.",
         "Connect the learning to applied impact.",
         ("What was the context?", "Why was it worth learning?",
          "How did you apply it?", "What did it enable?")),
    ],
    "Hire and Develop the Best": [
        ("Tell me about a time you helped develop someone on your team who was struggling.",
         "Focus on coaching and raising performance.",
         ("Who needed development?", "What was your role?",
          "What coaching approach did you take?", "How did they improve?")),
        ("Describe how you raised the bar in a hiring decision.",
         "Show how you assessed talent against a high standard.",
         ("What role were you hiring for?", "What was your part in the decision?",
          "How did you evaluate candidates?", "How did the hire perform?")),
        ("Tell me about someone you mentored who went on to a bigger role.",
         "Highlight long-term investment in people.",
         ("Who was the person?", "What did they need from you?",
          "How did you support their growth?", "Where did they end up?")),
    ],
    "Insist on the Highest Standards": [
        ("Tell me about a time you refused to compromise on quality.",
         "Show how you held the bar under pressure.",
         ("What was being delivered?", "What standard was at risk?",
          "What did you insist on and how?", "What was the quality outcome?")),
        ("Describe a time you raised the standard for your team's work.",
         "Focus on lasting mechanisms, not one-off fixes.",
         ("What was the existing standard?", "Why was it not enough?",
          "How did you raise it?", "How did results change?")),
        ("Tell me about a defect you caught before it reached customers.",
         "Show attention to detail and follow-through.",
         ("What were you reviewing?", "What was your responsibility?",
          "How did you find and fix it?", "What did it prevent?")),
    ],
    "Think Big": [
        ("Tell me about a time you proposed a bold vision that others initially doubted.",
         "Show how you communicated direction and won support.",
         ("What was the status quo?", "What was your vision?",
          "How did you get others on board?", "What came of it?")),
        ("Describe a time you turned a small project into something much larger.",
         "Highlight scaling ambition with results.",
         ("Where did it start?", "What opportunity did you see?",
          "How did you expand it?", "What was the final scale?")),
        ("Tell me about a long-term goal you set for your team and how you pursued it.",
         "Connect ambition with a concrete plan.",
         ("What was the team's situation?", "What goal did you set?",
          "What plan did you drive?", "How far did you get?")),
    ],
    "Bias for Action": [
        ("Describe a situation where you made an important decision without all the information you wanted.",
         "Highlight calculated risk under uncertainty.",
         ("What decision was needed?", "What information was missing?",
          "How did you proceed anyway?", "What was the outcome?")),
        ("Tell me about a time you moved quickly to seize an opportunity.",
         "Show speed balanced with judgment.",
         ("What was the opportunity?", "Why did timing matter?",
          "What did you do first?", "What did acting fast gain?")),
        ("Tell me about a time you unblocked a stalled project.",
         "Focus on breaking inertia with concrete steps.",
         ("Why had it stalled?", "What was your role?",
          "What actions restarted it?", "What was delivered?")),
    ],
    "Frugality": [
        ("Tell me about a time you delivered a result with far fewer resources than expected.",
         "Show resourcefulness under constraint.",
         ("What were the constraints?", "What had to be delivered?",
          "How did you stretch resources?", "What did you achieve and save?")),
        ("Describe a time you cut a significant cost without hurting quality.",
         "Quantify the savings and the preserved quality.",
         ("Where was the cost?", "What target did you have?",
          "What did you change?", "What was saved?")),
        ("Tell me about a time a constraint led you to a better solution.",
         "Highlight invention driven by limits.",
         ("What constraint did you face?", "What were you trying to do?",
          "How did you work around it?", "Why was the result better?")),
    ],
    "Earn Trust": [
        ("Tell me about a time you had to rebuild trust with a colleague or stakeholder.",
         "Show candor and follow-through.",
         ("How was trust lost?", "Why did it matter to fix?",
          "What did you do to rebuild it?", "How did the relationship change?")),
        ("Describe a time you delivered difficult feedback.",
         "Focus on honesty delivered with respect.",
         ("Who needed the feedback?", "What was at stake?",
          "How did you deliver it?", "How was it received and acted on?")),
        ("Tell me about a time you admitted a mistake publicly.",
         "Highlight vulnerability as a trust builder.",
         ("What was the mistake?", "Who was affected?",
          "How did you own it?", "What effect did it have on trust?")),
    ],
    "Dive Deep": [
        ("Tell me about a time you dug into data to find the root cause of a problem.",
         "Show comfort with detail and metrics.",
         ("What was the symptom?", "What did you need to find?",
          "How did you analyze it?", "What root cause and fix resulted?")),
        ("Describe a time your attention to detail caught something others missed.",
         "Highlight auditing and skepticism when anecdotes and metrics differ.",
         ("What were you reviewing?", "Why did it look off?",
          "How did you investigate?", "What did it uncover?")),
        ("Tell me about a time you had to understand a system you did not build.",
         "Show how you went levels deep quickly.",
         ("What was the system?", "Why did you need to understand it?",
          "How did you learn its internals?", "What did you do with that knowledge?")),
    ],
    "Have Backbone; Disagree and Commit": [
        ("Tell me about a time you disagreed with your manager and how you handled it.",
         "Show respectful challenge followed by commitment.",
         ("What was the disagreement?", "What was your position?",
          "How did you raise it?", "What happened after the decision?")),
        ("Describe a time you committed fully to a decision you had argued against.",
         "Focus on the commitment after the debate.",
         ("What was decided?", "Why did you disagree?",
          "How did you support it anyway?", "What was the outcome?")),
        ("Tell me about a time you pushed back on a popular idea.",
         "Highlight conviction backed by evidence.",
         ("What was the idea?", "Why did you have concerns?",
          "How did you make your case?", "What did the group decide?")),
    ],
    "Deliver Results": [
        ("Tell me about a time you delivered an important project under a tight deadline.",
         "Show focus on key inputs and quality.",
         ("What was the project?", "What deadline did you face?",
          "How did you prioritize and execute?", "What did you deliver?")),
        ("Describe a time you hit a goal despite a major setback.",
         "Highlight resilience and course correction.",
         ("What was the goal?", "What setback hit?",
          "How did you recover?", "What result did you reach?")),
        ("Tell me about your most significant measurable accomplishment.",
         "Quantify the outcome and your contribution.",
         ("What was the context?", "What were you responsible for?",
          "What did you personally do?", "What numbers prove the impact?")),
    ],
    "Strive to be Earth's Best Employer": [
        ("Tell me about a time you improved the working environment for your team.",
         "Show care for people alongside results.",
         ("What was wrong with the environment?", "What did you take on?",
          "What changes did you make?", "How did the team respond?")),
        ("Describe a time you made your team more inclusive.",
         "Highlight concrete actions and their effect.",
         ("Who was being left out?", "What did you aim to change?",
          "What did you do?", "What improved?")),
        ("Tell me about a time you helped a colleague through a difficult period.",
         "Focus on empathy and practical support.",
         ("What was the colleague facing?", "What role did you play?",
          "How did you help?", "What was the outcome for them and the team?")),
    ],
    "Success and Scale Bring Broad Responsibility": [
        ("Tell me about a time you considered the wider impact of a decision beyond your team.",
         "Show awareness of secondary effects.",
         ("What was the decision?", "Who else could be affected?",
          "How did you account for them?", "What was the broader outcome?")),
        ("Describe a time you changed a plan to reduce harm to users or the community.",
         "Highlight responsibility at scale.",
         ("What was the plan?", "What harm did you foresee?",
          "What did you change?", "What did it prevent?")),
        ("Tell me about a time you made something more sustainable or responsible.",
         "Connect the change to measurable impact.",
         ("What was the starting point?", "What did you set out to improve?",
          "What actions did you take?", "What was the measured effect?")),
    ],
}

_by_key = {}


def _normalize(title: str) -> str:
    return re.sub(r"[^a-z0-9]", "", (title or "").lower())


for _id, _title, _desc in LEADERSHIP_PRINCIPLES:
    _by_key[_normalize(_title)] = (_id, _title, _desc)


def resolve_principle(title: str) -> Optional[tuple]:
    """Map a loosely written title onto its catalog entry (id, title, description)."""
    return _by_key.get(_normalize(title))


def principle_titles() -> List[str]:
    return [title for _, title, _ in LEADERSHIP_PRINCIPLES]


def fallback_pool(principle_titles_in_order: List[str]) -> Dict[str, List[Question]]:
    """All catalog questions for the given principles, keyed by title."""
    pool = {}
    for title in principle_titles_in_order:
        entry = resolve_principle(title)
        if entry is None:
            continue
        pid, canonical, _ = entry
        questions = []
        for n, (text, context, hints) in enumerate(FALLBACK_QUESTIONS[canonical], start=1):
            situation, task, action, result = hints
            questions.append(Question(
                id=f"{pid}-{n}",
                principle=canonical,
                question_text=text,
                context=context,
                star_framework=StarHints(situation=situation, task=task, action=action, result=result),
            ))
        pool[canonical] = questions
    return pool


def round_robin(pool: Dict[str, List[Question]], limit: int) -> List[Question]:
    """Interleave per-principle lists (first question of each, then second, ...)."""
    out = []
    depth = max((len(v) for v in pool.values()), default=0)
    for i in range(depth):
        for questions in pool.values():
            if i < len(questions):
                out.append(questions[i])
    return out[:limit]
